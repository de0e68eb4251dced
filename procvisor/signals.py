"""Signal name lookup and delivery to processes."""

from __future__ import annotations

import os
import signal
import subprocess
import sys

_POSIX_NAMES = (
    "SIGABRT", "SIGALRM", "SIGBUS", "SIGCHLD", "SIGCLD", "SIGCONT", "SIGEMT",
    "SIGFPE", "SIGHUP", "SIGILL", "SIGINFO", "SIGINT", "SIGIO", "SIGIOT",
    "SIGKILL", "SIGPIPE", "SIGPOLL", "SIGPROF", "SIGPWR", "SIGQUIT", "SIGSEGV",
    "SIGSTKFLT", "SIGSTOP", "SIGSYS", "SIGTERM", "SIGTRAP", "SIGTSTP",
    "SIGTTIN", "SIGTTOU", "SIGUNUSED", "SIGURG", "SIGUSR1", "SIGUSR2",
    "SIGVTALRM", "SIGWINCH", "SIGXCPU", "SIGXFSZ",
)

_SIGNAL_MAP: dict[str, int] = {
    name: getattr(signal, name) for name in _POSIX_NAMES if hasattr(signal, name)
}

_IS_WINDOWS = sys.platform == "win32"


def _windows_signal(signal_name: str) -> int:
    if signal_name in ("USR1", "USR2"):
        raise ValueError(f"signal {signal_name} is not supported in windows")
    if signal_name in ("HUP", "INT", "QUIT", "KILL"):
        return getattr(signal, "SIG" + signal_name, signal.SIGTERM)
    return signal.SIGTERM


def to_signal(signal_name: str) -> int:
    """Convert a signal name such as ``TERM`` or ``SIGHUP`` to a signal.

    Unknown names map to SIGTERM.
    """
    if _IS_WINDOWS:
        return _windows_signal(signal_name)
    if not signal_name.startswith("SIG"):
        signal_name = "SIG" + signal_name
    return _SIGNAL_MAP.get(signal_name, signal.SIGTERM)


def kill(pid: int, sig: int, sig_children: bool) -> None:
    """Send ``sig`` to the process ``pid``.

    When ``sig_children`` is true the signal goes to the whole process group
    led by ``pid``. Raises OSError when delivery fails.
    """
    if _IS_WINDOWS:
        try:
            subprocess.run(
                ["taskkill", "/F", "/T", "/PID", str(pid)],
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
            return
        except FileNotFoundError:
            os.kill(pid, sig)
            return
    os.kill(-pid if sig_children else pid, sig)