"""Settings that decide how a program's child process is launched."""

from __future__ import annotations

import logging
import os
import re
import sys

from .state import ProgramConfig

try:
    import grp
    import pwd
except ImportError:  # pragma: no cover - not available on Windows
    grp = None
    pwd = None

_log = logging.getLogger(__name__)

_IS_WINDOWS = sys.platform == "win32"
_INTEGER = re.compile(r"[+-]?\d+")
_ENV_ITEM = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)\s*=\s*(\"[^\"]*\"|'[^']*'|[^,]*)\s*,?")


def exit_codes(config: ProgramConfig) -> list[int]:
    """Return the expected exit codes of the program (``exitcodes``, default ``0,2``)."""
    return [
        int(item)
        for item in config.get_string("exitcodes", "0,2").split(",")
        if _INTEGER.fullmatch(item)
    ]


def in_exit_codes(config: ProgramConfig, code: int) -> bool:
    """True if ``code`` is one of the program's expected exit codes."""
    return code in exit_codes(config)


def resolve_user(user_spec: str) -> tuple[int, int] | None:
    """Resolve ``user`` or ``user:group`` to a ``(uid, gid)`` pair.

    Returns None for an empty spec or where users cannot be switched.
    Raises LookupError when the user or group does not exist.
    """
    if not user_spec or pwd is None or grp is None:
        return None
    user_name, _, group_name = user_spec.partition(":")
    try:
        entry = pwd.getpwnam(user_name)
    except KeyError:
        raise LookupError(f"unknown user {user_name}") from None
    gid = entry.pw_gid
    if group_name:
        try:
            gid = grp.getgrnam(group_name).gr_gid
        except KeyError:
            raise LookupError(f"unknown group {group_name}") from None
    return entry.pw_uid, gid


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _parse_environment(text: str) -> dict[str, str]:
    return {m.group(1): _unquote(m.group(2)) for m in _ENV_ITEM.finditer(text) if m.group(0).strip()}


def _read_env_file(path: str) -> dict[str, str]:
    result: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("export "):
                line = line[len("export "):].strip()
            key, sep, value = line.partition("=")
            if sep and key.strip():
                result[key.strip()] = _unquote(value)
    return result


def build_environment(config: ProgramConfig) -> dict[str, str]:
    """Return the environment of the child: the current one, then ``envFiles``,
    then ``environment``, each overriding what came before."""
    env = dict(os.environ)
    files = config.get_string_expression("envFiles", "")
    for item in files.split(","):
        path = item.strip()
        if not path:
            continue
        if not os.path.isabs(path):
            path = os.path.join(config.config_dir, path)
        try:
            env.update(_read_env_file(path))
        except OSError as exc:
            _log.error("fail to read environment file %s: %s", path, exc)
    env.update(_parse_environment(config.get_string_expression("environment", "")))
    return env


def popen_options(config: ProgramConfig) -> dict[str, object]:
    """Return keyword arguments for ``subprocess.Popen`` built from the config.

    Raises LookupError when the configured user cannot be found.
    """
    options: dict[str, object] = {"env": build_environment(config)}
    directory = config.get_string_expression("directory", "")
    if directory:
        options["cwd"] = directory
    if not _IS_WINDOWS:
        # the child leads its own process group so group signals reach it
        options["start_new_session"] = True
    ids = resolve_user(config.get_string("user", ""))
    if ids is not None:
        uid, gid = ids
        if (uid, gid) == (os.getuid(), os.getgid()):
            _log.info("no need to switch user")
        else:
            options["user"] = uid
            options["group"] = gid
    return options