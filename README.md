# procvisor

procvisor is a library for keeping long-running programs alive. It launches a
program as a child process, marks it running once it has stayed up for
`startsecs`, starts it again according to its `autorestart` and `exitcodes`
settings, stops it with a configurable sequence of signals before falling
back to `SIGKILL`, and reports its state, pid, uptime and exit status.

## Installation

Install from a checkout with pip. The package has no runtime dependencies;
the `test` extra pulls in pytest.

## Modules

- `procvisor.command` — `parse_command` splits a command line, honouring
  single and double quotes and backslash escapes; `create_command` accepts a
  string or a sequence; `execute_command` runs a command and returns its
  combined output.
- `procvisor.signals` — `to_signal` turns `"TERM"` or `"SIGHUP"` into a
  signal number (unknown names give `SIGTERM`); `kill(pid, sig, sig_children)`
  sends it to a process or to its whole process group.
- `procvisor.paths` — `path_split` and `path_expand`, which replaces a
  leading `~` or `~user` with the home directory.
- `procvisor.state` — the `State` enum (`STOPPED`, `STARTING`, `RUNNING`,
  `BACKOFF`, `STOPPING`, `EXITED`, `FATAL`, `UNKNOWN`) and `ProgramConfig`,
  the settings of one `program:` or `eventlistener:` section, with typed
  getters (`get_string`, `get_int`, `get_bool`, `get_bytes`,
  `get_string_expression`).
- `procvisor.launch` — how a child is launched: `exit_codes`,
  `in_exit_codes`, `resolve_user`, `build_environment` (current environment,
  then `envFiles`, then `environment`) and `popen_options`.
- `procvisor.process` — `Process` runs one program and tracks its state.
- `procvisor.manager` — `Manager` holds all processes, ordered by priority
  then name, and finds them by `program`, `group:program` or `group:*`.
- `procvisor.types` — `ProcessInfo` (with `full_name`, `to_dict`,
  `from_dict`), `ReloadConfigResult`, `ProcessSignal` and
  `sort_process_infos`.
- `procvisor.util` — small list helpers (`in_array`, `has_all_elements`,
  `sub`, `is_same_string_array`).

## Parsing a command line

```python
from procvisor.command import parse_command

parse_command("program 'this is arg1' args=\"this is arg2\"")
# ['program', 'this is arg1', 'args="this is arg2"']
```

An empty or blank command raises `ValueError`.

## Running programs

```python
from procvisor.manager import Manager
from procvisor.state import ProgramConfig, State

manager = Manager()
config = ProgramConfig(
    name="program:web",
    group="web",
    settings={
        "command": "python -m http.server 8000",
        "startsecs": "1",
        "autorestart": "true",
        "stopsignal": "TERM",
        "stdout_logfile": "/tmp/web.out",
    },
)
manager.create_process("supervisor", config)
manager.start_auto_start_programs()

web = manager.find("web:web")
print(web.state, web.pid, web.description)
manager.stop_all_processes()
print(web.state is State.EXITED or web.state)
```

`Process.start(wait)` runs the program in a background thread; with `wait`
it returns once the program is running or has failed. `Process.stop(wait)`
sends each signal of `stopsignal`, waits up to `stopwaitsecs` for each, then
sends `SIGKILL` and waits up to `killwaitsecs`. With `stopasgroup` /
`killasgroup` the signals go to the child's process group.

A program's stdout and stderr are appended to `stdout_logfile` and
`stderr_logfile` (or `stderr` is merged into stdout with
`redirect_stderr=true`); `/dev/null` discards them.

## What the package does not do

- It does not read a configuration file; `ProgramConfig` objects are built
  by the caller.
- It has no command-line program, no XML-RPC or HTTP server and no client for
  talking to a running supervisor.
- Log files are plain appends: there is no size limit, rotation, or reading
  back of logs through the package.
- Event listener sections can be created and launched, but no events are
  emitted to them.
- There are no scheduled (cron) starts and no restarts on file changes.