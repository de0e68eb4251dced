"""Split command lines into arguments and run them."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

_QUOTES = "\"'"


def _find_char(s: str, offset: int, ch: str) -> int:
    """Position of ``ch`` in ``s`` from ``offset``, skipping escaped chars, or -1."""
    i = offset
    while i < len(s):
        if s[i] == "\\":
            i += 2
            continue
        if s[i] == ch:
            return i
        i += 1
    return -1


def _skip_space(s: str, offset: int) -> int:
    """Position of the first non-space char from ``offset``, or -1."""
    for i in range(offset, len(s)):
        if not s[i].isspace():
            return i
    return -1


def _append_argument(arg: str, args: list[str]) -> None:
    if arg[0] in _QUOTES:
        args.append(arg[1:-1])
    else:
        args.append(arg)


def parse_command(command: str) -> list[str]:
    """Split a command line into arguments, honouring quotes and backslashes.

    Raises ValueError when no argument is found.
    """
    args: list[str] = []
    length = len(command)
    i = 0
    while i < length:
        j = _skip_space(command, i)
        if j == -1:
            break
        i = j
        while j < length:
            ch = command[j]
            if ch.isspace():
                _append_argument(command[i:j], args)
                i = j + 1
                break
            if ch == "\\":
                j += 2
                continue
            if ch in _QUOTES:
                k = _find_char(command, j + 1, ch)
                if k == -1:
                    _append_argument(command[i:], args)
                    i = length
                else:
                    _append_argument(command[i:k + 1], args)
                    i = k + 1
                break
            j += 1
        else:
            _append_argument(command[i:], args)
            i = length
    if not args:
        raise ValueError("no command from empty string")
    return args


def create_command(command: str | Sequence[str]) -> list[str]:
    """Return the argument list for a command given as a string or a sequence."""
    args = parse_command(command) if isinstance(command, str) else list(command)
    if not args:
        raise ValueError("empty command")
    return args


def execute_command(command: str | Sequence[str]) -> bytes:
    """Run a command and return its combined stdout and stderr.

    Raises subprocess.CalledProcessError on a non-zero exit status.
    """
    args = create_command(command)
    completed = subprocess.run(
        args, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, check=True
    )
    return completed.stdout