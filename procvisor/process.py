"""A supervised program: launching, restarting, stopping and status queries."""

from __future__ import annotations

import logging
import os
import signal as signal_mod
import subprocess
import threading
import time
from datetime import datetime
from typing import IO, Callable

from .command import create_command
from .launch import in_exit_codes, popen_options
from .paths import path_expand
from .signals import kill, to_signal
from .state import ProgramConfig, State

_log = logging.getLogger(__name__)

_SIGKILL = getattr(signal_mod, "SIGKILL", signal_mod.SIGTERM)

# avoid flooding the log when a program fails to start very quickly
_QUICK_FAILURE_SECONDS = 2
_QUICK_FAILURE_PAUSE = 5

_ALIVE_STATES = frozenset({State.STARTING, State.RUNNING, State.STOPPING})
_NO_PID_STATES = frozenset(
    {State.STOPPED, State.FATAL, State.UNKNOWN, State.EXITED, State.BACKOFF}
)


class Process:
    """One program or event listener and the child process that runs it."""

    def __init__(self, supervisor_id: str, config: ProgramConfig) -> None:
        self.supervisor_id = supervisor_id
        self.config = config
        self._popen: subprocess.Popen[bytes] | None = None
        self._start_time = 0.0
        self._stop_time = 0.0
        self._state = State.STOPPED
        self._in_start = False
        self._stop_by_user = False
        self._retry_times = 0
        self._lock = threading.RLock()
        self._wakeup = threading.Event()

    # ------------------------------------------------------------------ info

    @property
    def name(self) -> str:
        """The program or event listener name, or "" for other sections."""
        if self.config.is_program():
            return self.config.program_name
        if self.config.is_event_listener():
            return self.config.event_listener_name
        return ""

    @property
    def group(self) -> str:
        """The group the program belongs to."""
        return self.config.group

    @property
    def description(self) -> str:
        """Human readable status: pid and uptime when running, else the stop time."""
        with self._lock:
            if self._state == State.RUNNING and self._popen is not None:
                seconds = int(time.time() - self._start_time)
                minutes, hours = seconds // 60, seconds // 3600
                days = hours // 24
                clock = f"{hours % 24}:{minutes % 60:02d}:{seconds % 60:02d}"
                if days > 0:
                    return f"pid {self._popen.pid}, uptime {days} days, {clock}"
                return f"pid {self._popen.pid}, uptime {clock}"
            if self._state != State.STOPPED:
                stopped = datetime.fromtimestamp(self._stop_time).astimezone()
                return stopped.strftime("%Y-%m-%d %H:%M:%S %z %Z")
            return ""

    @property
    def exit_status(self) -> int:
        """Exit status of the program once it has exited, else 0."""
        with self._lock:
            if self._state in (State.EXITED, State.BACKOFF):
                code = self._exit_code()
                return 0 if code is None else code
            return 0

    @property
    def pid(self) -> int:
        """Pid of the child while it is starting, running or stopping, else 0."""
        with self._lock:
            if self._state in _NO_PID_STATES or self._popen is None:
                return 0
            return self._popen.pid

    @property
    def state(self) -> State:
        """The current lifecycle state."""
        return self._state

    @property
    def start_time(self) -> float:
        """Time of the last start as seconds since the epoch (0 if never)."""
        return self._start_time

    @property
    def stop_time(self) -> float:
        """Time of the last exit, or 0 while the program is alive."""
        if self._state in _ALIVE_STATES:
            return 0.0
        return self._stop_time

    @property
    def stdout_logfile(self) -> str:
        """The stdout log file with ``~`` expanded."""
        return self._logfile("stdout_logfile")

    @property
    def stderr_logfile(self) -> str:
        """The stderr log file with ``~`` expanded."""
        return self._logfile("stderr_logfile")

    @property
    def priority(self) -> int:
        """The configured priority, 999 by default."""
        return self.config.get_int("priority", 999)

    @property
    def status(self) -> str:
        """``exit status N`` once the child exited normally, else ``running``."""
        popen = self._popen
        if popen is not None and popen.returncode is not None and popen.returncode >= 0:
            return f"exit status {popen.returncode}"
        return "running"

    def is_auto_start(self) -> bool:
        """True if the program starts together with the supervisor."""
        return self.config.get_string("autostart", "true") == "true"

    def is_auto_restart(self) -> bool:
        """True if the program should be started again after it exits."""
        auto_restart = self.config.get_string("autorestart", "unexpected")
        if auto_restart == "false":
            return False
        if auto_restart == "true":
            return True
        with self._lock:
            code = self._exit_code()
            # restart only when the exit code is not an expected one
            return code is not None and not in_exit_codes(self.config, code)

    def is_running(self) -> bool:
        """True while the child process is alive."""
        popen = self._popen
        return popen is not None and popen.poll() is None

    # --------------------------------------------------------------- control

    def start(self, wait: bool) -> None:
        """Start the program in the background, restarting it as configured.

        With ``wait`` the call returns once the program is running or has
        failed to start.
        """
        _log.info("try to start program %s", self.name)
        with self._lock:
            if self._in_start:
                _log.info("program %s is already started", self.name)
                return
            self._in_start = True
            self._stop_by_user = False
            self._wakeup.clear()

        started = threading.Event()
        worker = threading.Thread(
            target=self._supervise, args=(started,), name=f"run-{self.name}", daemon=True
        )
        worker.start()
        if wait:
            started.wait()

    def stop(self, wait: bool) -> None:
        """Send the stop signals, then SIGKILL if the program does not exit.

        With ``wait`` the call returns once the program has stopped.
        """
        with self._lock:
            self._stop_by_user = True
            self._wakeup.set()
            running = self.is_running()
        if not running:
            _log.info("program %s is not running", self.name)
            return
        _log.info("stop the program %s", self.name)
        stop_as_group = self.config.get_bool("stopasgroup", False)
        kill_as_group = self.config.get_bool("killasgroup", stop_as_group)
        if stop_as_group and not kill_as_group:
            _log.error("Cannot set stopasgroup=true and killasgroup=false")
        worker = threading.Thread(
            target=self._stop_worker,
            args=(
                self.config.get_string("stopsignal", "SIGTERM").split(),
                self.config.get_int("stopwaitsecs", 10),
                self.config.get_int("killwaitsecs", 2),
                stop_as_group,
                kill_as_group,
            ),
            name=f"stop-{self.name}",
            daemon=True,
        )
        worker.start()
        if wait:
            worker.join()

    def send_process_stdin(self, chars: str) -> None:
        """Write ``chars`` to the program's stdin.

        Raises OSError when the program has no open stdin.
        """
        popen = self._popen
        stdin = popen.stdin if popen is not None else None
        if stdin is None or stdin.closed:
            raise OSError("NO_FILE")
        stdin.write(chars.encode())
        stdin.flush()

    def signal(self, sig: int, sig_children: bool) -> None:
        """Send ``sig`` to the program, and to its process group if ``sig_children``.

        Raises ProcessLookupError when the program is not running.
        """
        with self._lock:
            if not self.is_running():
                raise ProcessLookupError("process is not started")
            _log.info("send signal %s to program %s", sig, self.name)
            kill(self._popen.pid, sig, sig_children)

    # -------------------------------------------------------------- internals

    def _logfile(self, key: str) -> str:
        file_name = self.config.get_string_expression(key, "/dev/null")
        try:
            return path_expand(file_name)
        except LookupError:
            return file_name

    def _exit_code(self) -> int | None:
        popen = self._popen
        if popen is None or popen.returncode is None:
            return None
        return -1 if popen.returncode < 0 else popen.returncode

    def _set_state(self, state: State) -> None:
        _log.debug("program %s: %s -> %s", self.name, self._state, state)
        self._state = state

    def _supervise(self, started: threading.Event) -> None:
        try:
            while True:
                self._run(started.set)
                started.set()
                if time.time() - self._start_time < _QUICK_FAILURE_SECONDS:
                    self._wakeup.wait(_QUICK_FAILURE_PAUSE)
                if self._stop_by_user:
                    _log.info("program %s stopped by user, not started again", self.name)
                    break
                if not self.is_auto_restart():
                    _log.info("program %s is not restarted: autorestart is off", self.name)
                    break
        finally:
            with self._lock:
                self._in_start = False

    def _fail(self, reason: str, finish: Callable[[], None]) -> None:
        _log.error("program %s: %s", self.name, reason)
        self._set_state(State.FATAL)
        finish()

    def _run(self, finish: Callable[[], None]) -> None:
        finished = False

        def finish_once() -> None:
            nonlocal finished
            if not finished:
                finished = True
                finish()

        with self._lock:
            if self.is_running():
                _log.info("program %s is already running", self.name)
                finish_once()
                return
            self._start_time = time.time()
            self._retry_times = 0

        start_secs = self.config.get_int("startsecs", 1)
        restart_pause = self.config.get_int("restartpause", 0)
        start_retries = self.config.get_int("startretries", 3)

        while not self._stop_by_user:
            if restart_pause > 0 and self._retry_times:
                _log.info("start program %s after %d seconds", self.name, restart_pause)
                self._wakeup.wait(restart_pause)
                if self._stop_by_user:
                    break

            with self._lock:
                self._set_state(State.STARTING)
                self._retry_times += 1
                try:
                    args = create_command(self.config.get_string_expression("command", ""))
                    options = popen_options(self.config)
                except (ValueError, LookupError) as exc:
                    self._fail(f"fail to create program: {exc}", finish_once)
                    break
                try:
                    popen = self._spawn(args, options)
                except OSError as exc:
                    self._popen = None
                    if self._retry_times >= start_retries:
                        self._fail(f"fail to start program with error:{exc}", finish_once)
                        break
                    _log.info("fail to start program %s: %s", self.name, exc)
                    self._set_state(State.BACKOFF)
                    continue
                self._popen = popen
                if start_secs <= 0:
                    self._set_state(State.RUNNING)

            if start_secs > 0:
                try:
                    popen.wait(timeout=start_secs)
                except subprocess.TimeoutExpired:
                    with self._lock:
                        if self._state == State.STARTING:
                            _log.info("success to start program %s", self.name)
                            self._set_state(State.RUNNING)
            finish_once()

            popen.wait()
            _log.info("program %s stopped with status %s", self.name, popen.returncode)

            with self._lock:
                self._stop_time = time.time()
                if popen.stdin is not None:
                    try:
                        popen.stdin.close()
                    except OSError:
                        pass
                if self._state == State.RUNNING:
                    self._set_state(State.EXITED)
                    break
                self._set_state(State.BACKOFF)
                if self._retry_times >= start_retries:
                    self._fail(
                        f"fail to start program because retry times is greater than {start_retries}",
                        finish_once,
                    )
                    break

    def _spawn(self, args: list[str], options: dict[str, object]) -> subprocess.Popen[bytes]:
        opened: list[IO[bytes]] = []
        try:
            if self.config.is_program():
                stdout = self._log_target(self.stdout_logfile, opened)
                if self.config.get_bool("redirect_stderr", False):
                    stderr = subprocess.STDOUT
                else:
                    stderr = self._log_target(self.stderr_logfile, opened)
            else:
                stdout, stderr = subprocess.DEVNULL, None
            return subprocess.Popen(
                args, stdin=subprocess.PIPE, stdout=stdout, stderr=stderr, **options
            )
        finally:
            for handle in opened:
                handle.close()

    @staticmethod
    def _log_target(path: str, opened: list[IO[bytes]]) -> object:
        if path in ("", "/dev/null"):
            return subprocess.DEVNULL
        if path in ("/dev/stdout", "/dev/stderr"):
            return None
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        handle = open(path, "ab")
        opened.append(handle)
        return handle

    def _has_exited(self) -> bool:
        return self._state not in _ALIVE_STATES

    def _wait_until_exited(self, seconds: float) -> bool:
        deadline = time.monotonic() + seconds
        while time.monotonic() < deadline:
            if self._has_exited():
                return True
            time.sleep(0.01)
        return self._has_exited()

    def _try_signal(self, sig: int, sig_children: bool) -> None:
        try:
            self.signal(sig, sig_children)
        except OSError as exc:
            _log.info("fail to send signal %s to program %s: %s", sig, self.name, exc)

    def _stop_worker(
        self,
        signal_names: list[str],
        wait_secs: int,
        kill_wait_secs: int,
        stop_as_group: bool,
        kill_as_group: bool,
    ) -> None:
        for name in signal_names:
            try:
                sig = to_signal(name)
            except ValueError:
                continue
            _log.info("send stop signal %s to program %s", name, self.name)
            self._try_signal(sig, stop_as_group)
            if self._wait_until_exited(wait_secs):
                return
        _log.info("force to kill the program %s", self.name)
        self._try_signal(_SIGKILL, kill_as_group)
        self._wait_until_exited(kill_wait_secs)