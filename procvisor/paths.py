"""Path splitting and home-directory expansion."""

from __future__ import annotations

import os

try:
    import pwd
except ImportError:  # pragma: no cover - not available on Windows
    pwd = None

_SEPARATORS = os.sep + (os.altsep or "")


def _split(path: str) -> tuple[str, str]:
    """Split after the last separator; the directory keeps its trailing separator."""
    i = len(path)
    while i > 0 and path[i - 1] not in _SEPARATORS:
        i -= 1
    return path[:i], path[i:]


def path_split(path: str) -> list[str]:
    """Return the non-empty components of ``path`` from first to last."""
    parts: list[str] = []
    current = path
    while True:
        directory, name = _split(current)
        if name:
            parts.append(name)
        if not directory:
            break
        current = directory[:-1]
    parts.reverse()
    return parts


def _home_of(user_part: str) -> str:
    if user_part == "~":
        if pwd is not None:
            return pwd.getpwuid(os.getuid()).pw_dir
        return os.path.expanduser("~")
    name = user_part[1:]
    if pwd is None:
        raise LookupError(f"unknown user {name}")
    try:
        return pwd.getpwnam(name).pw_dir
    except KeyError:
        raise LookupError(f"unknown user {name}") from None


def path_expand(path: str) -> str:
    """Replace a leading ``~`` or ``~user`` with that user's home directory.

    Raises LookupError when the user does not exist.
    """
    parts = path_split(path)
    if parts and parts[0].startswith("~"):
        parts[0] = _home_of(parts[0])
        return os.path.normpath(os.path.join(*parts))
    return path