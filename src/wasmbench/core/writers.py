"""CSV and summary report writers."""

import csv
import logging
from collections.abc import Iterable
from pathlib import Path
from types import TracebackType
from typing import TextIO

from ..constants import CSV_HEADER
from ..models import Metrics, Phase, PhaseAverage

logger = logging.getLogger(__name__)


class OutputError(Exception):
    """An output file could not be created or opened."""

    pass


def format_csv_row(metrics: Metrics | PhaseAverage) -> list[str]:
    """Format one observation as CSV fields.

    Times use 3 decimals, CPU usage 2 decimals with a literal '%',
    max RSS a plain integer.
    """
    return [
        f"{metrics.user_time_ms:.3f}",
        f"{metrics.system_time_ms:.3f}",
        f"{metrics.cpu_usage_pct:.2f}%",
        f"{metrics.wall_clock_ms:.3f}",
        str(metrics.max_rss_bytes),
    ]


class CsvWriter:
    """Appends accepted observations to one CSV file per phase.

    Files are opened once in append mode and stay open until close().
    The header is only written to files that are empty when opened.
    """

    def __init__(self, output_dir: Path, phases: Iterable[Phase] = tuple(Phase)) -> None:
        self.output_dir = output_dir
        self.phases = tuple(phases)
        self._files: dict[Phase, TextIO] = {}

    def path_for(self, phase: Phase) -> Path:
        return self.output_dir / phase.csv_name

    def open(self) -> None:
        """Open every phase file, writing headers where needed.

        Raises:
            OutputError: If any file cannot be opened. Files already
                opened are closed again before raising.
        """
        for phase in self.phases:
            path = self.path_for(phase)
            try:
                handle = open(path, "a", newline="", encoding="utf-8")
            except OSError as e:
                self.close()
                raise OutputError(f"Failed to open CSV file {path}: {e}") from e
            self._files[phase] = handle
            if handle.tell() == 0:
                csv.writer(handle, lineterminator="\n").writerow(CSV_HEADER)
            logger.debug(f"Opened {path}")

    def write(self, metrics: Metrics) -> None:
        """Append one row to the file for metrics.name.

        Raises:
            OutputError: If the row cannot be written
        """
        handle = self._files[metrics.name]
        try:
            csv.writer(handle, lineterminator="\n").writerow(format_csv_row(metrics))
        except OSError as e:
            raise OutputError(f"Failed to write CSV file {self.path_for(metrics.name)}: {e}") from e

    def close(self) -> None:
        for handle in self._files.values():
            handle.close()
        self._files.clear()

    @property
    def closed(self) -> bool:
        return not self._files

    def __enter__(self) -> "CsvWriter":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def render_phase_summary(average: PhaseAverage) -> str:
    """Render one phase's averages as a summary block."""
    return (
        f"===={average.name.display_name} Metrics====\n"
        f"Average Wall Clock Time: {average.wall_clock_ms:.3f} ms\n"
        f"Average User Time: {average.user_time_ms:.3f} ms\n"
        f"Average System Time: {average.system_time_ms:.3f} ms\n"
        f"Average Cpu Usage: {average.cpu_usage_pct:.2f} %\n"
        f"Average Max RSS: {average.max_rss_bytes}\n"
    )


def render_summary(averages: Iterable[PhaseAverage]) -> str:
    """Render the full summary, phases in Phase order, blank line after each."""
    ordered = sorted(averages, key=lambda a: list(Phase).index(a.name))
    return "".join(f"{render_phase_summary(average)}\n" for average in ordered)


def write_summary(path: Path, averages: Iterable[PhaseAverage]) -> None:
    """Write (overwrite) the summary report.

    Raises:
        OutputError: If the file cannot be written
    """
    try:
        path.write_text(render_summary(averages), encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Failed to write summary {path}: {e}") from e
