"""Run long-running programs as child processes: start, restart, stop, signal and report on them."""

__version__ = "0.7.3"