"""Process states and the configuration section of one program."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from enum import IntEnum, unique

_PROGRAM_PREFIX = "program:"
_EVENT_LISTENER_PREFIX = "eventlistener:"

_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_BYTE_UNITS = {"KB": 1024, "MB": 1024 * 1024, "GB": 1024 * 1024 * 1024}

_EXPRESSION = re.compile(r"%\(([^)]+)\)s")


@unique
class State(IntEnum):
    """Lifecycle state of a supervised process."""

    STOPPED = 0
    STARTING = 10
    RUNNING = 20
    BACKOFF = 30
    STOPPING = 40
    EXITED = 100
    FATAL = 200
    UNKNOWN = 1000

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass
class ProgramConfig:
    """One ``[program:x]`` or ``[eventlistener:x]`` section of the configuration."""

    name: str
    group: str = ""
    config_dir: str = "."
    settings: dict[str, str] = field(default_factory=dict)

    def get_string(self, key: str, default: str) -> str:
        """Return the raw value of ``key`` or ``default`` when it is absent."""
        value = self.settings.get(key)
        return default if value is None else str(value).strip()

    def get_int(self, key: str, default: int) -> int:
        """Return ``key`` as an integer, or ``default`` if absent or malformed."""
        value = self.settings.get(key)
        if value is None:
            return default
        try:
            return int(str(value).strip())
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        """Return ``key`` as a boolean, or ``default`` if absent or malformed."""
        value = self.settings.get(key)
        if value is None:
            return default
        text = str(value).strip()
        if text in _TRUE_WORDS:
            return True
        if text in _FALSE_WORDS:
            return False
        return default

    def get_bytes(self, key: str, default: int) -> int:
        """Return a size such as ``50MB`` in bytes, or ``default`` if malformed."""
        value = self.settings.get(key)
        if value is None:
            return default
        text = str(value).strip()
        multiplier = 1
        unit = text[-2:].upper()
        if unit in _BYTE_UNITS:
            multiplier = _BYTE_UNITS[unit]
            text = text[:-2].strip()
        try:
            return int(text) * multiplier
        except ValueError:
            return default

    def get_string_expression(self, key: str, default: str) -> str:
        """Return ``key`` with ``%(name)s`` placeholders filled in.

        Known names are ``here``, ``program_name``, ``group_name`` and
        ``ENV_<VAR>``; unknown placeholders are left untouched.
        """
        raw = self.get_string(key, default)
        variables = {
            "here": self.config_dir,
            "program_name": self.program_name,
            "group_name": self.group,
        }

        def replace(match: re.Match[str]) -> str:
            name = match.group(1)
            if name in variables:
                return variables[name]
            if name.startswith("ENV_") and name[4:] in os.environ:
                return os.environ[name[4:]]
            return match.group(0)

        return _EXPRESSION.sub(replace, raw)

    def is_program(self) -> bool:
        """True if this section describes a program."""
        return self.name.startswith(_PROGRAM_PREFIX)

    def is_event_listener(self) -> bool:
        """True if this section describes an event listener."""
        return self.name.startswith(_EVENT_LISTENER_PREFIX)

    @property
    def program_name(self) -> str:
        """The program name without its section prefix, or "" for other sections."""
        if self.is_program():
            return self.name[len(_PROGRAM_PREFIX):]
        return ""

    @property
    def event_listener_name(self) -> str:
        """The event listener name without its prefix, or "" for other sections."""
        if self.is_event_listener():
            return self.name[len(_EVENT_LISTENER_PREFIX):]
        return ""

    @property
    def group_name(self) -> str:
        """The group the program belongs to."""
        return self.group