"""Logging setup for wasmbench runs.

Iteration progress is logged at INFO, so ``-q`` leaves only failed
iterations and missing reports (WARNING and up) on screen. ``-v`` adds the
benchmark command line and per-block scan results. ``-vv`` also stamps each
record with its time and source location.
"""

import logging
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler


def level_for(verbosity: int, quiet: bool) -> int:
    """Map the -v count and the -q flag to a logging level. -q wins."""
    if quiet:
        return logging.WARNING
    return logging.DEBUG if verbosity >= 1 else logging.INFO


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
    stream: TextIO | None = None,
) -> Console:
    """Send log records through a RichHandler and return its console.

    The CLI prints tables and messages on the same console, so progress
    lines and results interleave in order. Without a stream the console
    resolves stderr lazily, which lets test runners capture it.
    """
    console = Console(
        file=stream,
        stderr=stream is None,
        force_terminal=not no_color,
        no_color=no_color,
    )
    detailed = verbosity >= 2
    handler = RichHandler(console=console, show_time=detailed, show_path=detailed)
    logging.basicConfig(
        level=level_for(verbosity, quiet),
        format="%(message)s",
        handlers=[handler],
        force=True,
    )
    return console
