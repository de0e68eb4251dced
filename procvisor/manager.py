"""Registry of the supervised programs and event listeners."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

from .process import Process
from .state import ProgramConfig

_log = logging.getLogger(__name__)


def sort_processes(procs: Iterable[Process]) -> list[Process]:
    """Return the programs among ``procs`` ordered by priority, then by name.

    Processes that are not programs (event listeners) are left out.
    """
    return sorted(
        (proc for proc in procs if proc.config.is_program()),
        key=lambda proc: (proc.priority, proc.name),
    )


class Manager:
    """Holds every process of the supervisor, keyed by name."""

    def __init__(self) -> None:
        self._procs: dict[str, Process] = {}
        self._event_listeners: dict[str, Process] = {}
        self._lock = threading.Lock()

    def create_process(self, supervisor_id: str, config: ProgramConfig) -> Process | None:
        """Create the program or event listener of ``config``, or return the
        existing one with the same name. Returns None for other sections."""
        with self._lock:
            if config.is_program():
                table, name, kind = self._procs, config.program_name, "process"
            elif config.is_event_listener():
                table, name, kind = self._event_listeners, config.event_listener_name, "event listener"
            else:
                return None
            proc = table.get(name)
            if proc is None:
                proc = Process(supervisor_id, config)
                table[name] = proc
            _log.info("create %s: %s", kind, name)
            return proc

    def start_auto_start_programs(self) -> None:
        """Start every program whose ``autostart`` setting is true."""
        for proc in self.processes():
            if proc.is_auto_start():
                proc.start(False)

    def add(self, name: str, proc: Process) -> None:
        """Register ``proc`` under ``name``."""
        with self._lock:
            self._procs[name] = proc
        _log.info("add process: %s", name)

    def remove(self, name: str) -> Process | None:
        """Unregister the program ``name`` and return it, or None if unknown."""
        with self._lock:
            proc = self._procs.pop(name, None)
        _log.info("remove process: %s", name)
        return proc

    def find(self, name: str) -> Process | None:
        """Return the single program named ``name`` or ``group:name``, else None."""
        procs = self.find_match(name)
        if len(procs) == 1:
            proc = procs[0]
            if proc.name == name or name == f"{proc.group}:{proc.name}":
                return proc
        return None

    def find_match(self, name: str) -> list[Process]:
        """Return the programs matching ``group:program``, ``group:*`` or ``program``."""
        group_name, sep, program_name = name.partition(":")
        if sep:
            result = [
                proc
                for proc in self.processes()
                if proc.group == group_name and program_name in ("*", proc.name)
            ]
        else:
            with self._lock:
                proc = self._procs.get(name)
            result = [] if proc is None else [proc]
        if not result:
            _log.info("fail to find process: %s", name)
        return result

    def clear(self) -> None:
        """Forget every registered program."""
        with self._lock:
            self._procs = {}

    def processes(self) -> list[Process]:
        """Return all programs ordered by priority."""
        with self._lock:
            procs = list(self._procs.values())
        return sort_processes(procs)

    def async_for_each_process(self, func: Callable[[Process], object]) -> list[Process]:
        """Run ``func`` on every program concurrently.

        Returns the programs in the order in which ``func`` finished with them.
        """
        procs = self.processes()
        if not procs:
            return []
        finished: list[Process] = []
        with ThreadPoolExecutor(max_workers=len(procs)) as pool:
            futures = {pool.submit(func, proc): proc for proc in procs}
            for future in as_completed(futures):
                future.result()
                finished.append(futures[future])
        return finished

    def stop_all_processes(self) -> None:
        """Stop every program in parallel and wait until all have stopped."""
        workers = [
            threading.Thread(target=proc.stop, args=(True,), daemon=True)
            for proc in self.processes()
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()