"""Data types exchanged between the supervisor and its clients."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Mapping


@dataclass
class ProcessInfo:
    """Status information of one supervised process."""

    name: str = ""
    group: str = ""
    description: str = ""
    start: int = 0
    stop: int = 0
    now: int = 0
    state: int = 0
    statename: str = ""
    spawnerr: str = ""
    exitstatus: int = 0
    logfile: str = ""
    stdout_logfile: str = ""
    stderr_logfile: str = ""
    pid: int = 0

    @property
    def full_name(self) -> str:
        """The name as ``group:name``, or just the name when there is no group."""
        if self.group:
            return f"{self.group}:{self.name}"
        return self.name

    def to_dict(self) -> dict[str, Any]:
        """Return the fields as a plain dictionary keyed by wire names."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProcessInfo":
        """Build an instance from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ReloadConfigResult:
    """Groups added, changed and removed by a configuration reload."""

    added_group: list[str] = field(default_factory=list)
    changed_group: list[str] = field(default_factory=list)
    removed_group: list[str] = field(default_factory=list)


@dataclass
class ProcessSignal:
    """A program name together with the signal to send to it."""

    name: str = ""
    signal: str = ""


def sort_process_infos(processes: list[ProcessInfo]) -> None:
    """Sort the list in place by program name."""
    processes.sort(key=lambda info: info.name)