"""Report scanning and per-phase metrics block parsing."""

import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum

from ..constants import BLOCK_TERMINATOR, FIELD_COUNT
from ..models import Metrics, Phase, match_phase

logger = logging.getLogger(__name__)

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_TIME_RE = re.compile(rf"^\s*({_NUMBER})\s*(\S*)")
_FLOAT_RE = re.compile(rf"^\s*({_NUMBER})")
_INT_RE = re.compile(r"^\s*(\d+)")

SECOND_UNITS = frozenset({"s", "sec"})
MICROSECOND_UNITS = frozenset({"µs", "μs", "us", "Âµs", "microseconds"})


def _value_after(line: str, prefix: str) -> str:
    return line[line.index(prefix) + len(prefix) :]


def parse_time_value(text: str) -> float | None:
    """Parse a time value into milliseconds.

    Args:
        text: Text following a time prefix, e.g. "1.5 s", "12.3ms", "200µs"

    Returns:
        Value in milliseconds, or None if no number could be read.
        Seconds are scaled up, microseconds scaled down, and any other
        (or missing) unit is taken to already be milliseconds.
    """
    match = _TIME_RE.match(text)
    if not match:
        return None
    number = float(match.group(1))
    unit = match.group(2)
    if unit in SECOND_UNITS:
        return number * 1000
    if unit in MICROSECOND_UNITS:
        return number / 1000
    return number


def parse_cpu_value(text: str) -> float | None:
    """Parse a bare CPU percentage, ignoring any trailing '%'."""
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else None


def parse_rss_value(text: str) -> int | None:
    """Parse a bare unsigned RSS value, ignoring any trailing unit."""
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else None


# (line prefix, Metrics field, value parser), tried in this order per line
FIELD_PARSERS: list[tuple[str, str, Callable[[str], float | int | None]]] = [
    ("Wall Clock Time:", "wall_clock_ms", parse_time_value),
    ("User time:", "user_time_ms", parse_time_value),
    ("System time:", "system_time_ms", parse_time_value),
    ("CPU Usage:", "cpu_usage_pct", parse_cpu_value),
    ("Max RSS:", "max_rss_bytes", parse_rss_value),
]


class MetricsBlockParser:
    """Accumulates the five metric lines of one phase block.

    Lines are fed one at a time until the terminator is seen. Each field is
    taken from its first parseable line; a line counts for at most one field.
    """

    def __init__(self, phase: Phase) -> None:
        self.phase = phase
        self.values: dict[str, float | int] = {}
        self.terminated = False

    def feed(self, line: str) -> bool:
        """Consume one line. Returns True when the line ends the block."""
        for prefix, field_name, parse in FIELD_PARSERS:
            if prefix in line:
                if field_name not in self.values:
                    value = parse(_value_after(line, prefix))
                    if value is not None:
                        self.values[field_name] = value
                    else:
                        logger.debug(f"{self.phase.value}: unparseable value in {line.strip()!r}")
                return False
        if BLOCK_TERMINATOR in line:
            self.terminated = True
            return True
        return False

    @property
    def complete(self) -> bool:
        return len(self.values) == FIELD_COUNT

    def result(self) -> Metrics | None:
        """Return the parsed Metrics, or None if any field is missing."""
        if not self.complete:
            return None
        return Metrics(name=self.phase, **self.values)


def parse_metrics_block(lines: Iterator[str], phase: Phase) -> Metrics | None:
    """Parse one block from an iterator positioned just after its header.

    Consumes lines up to and including the terminator, or to the end of
    input. Lines after the terminator are left in the iterator.

    Args:
        lines: Line iterator shared with the caller
        phase: Phase the block belongs to

    Returns:
        Metrics if all five fields were found, otherwise None
    """
    parser = MetricsBlockParser(phase)
    for line in lines:
        if parser.feed(line):
            break
    return parser.result()


class ScanState(Enum):
    """States of the report scanner."""

    SEEKING_HEADER = "seeking_header"
    IN_BLOCK = "in_block"


@dataclass
class ScanResult:
    """Outcome of scanning one report."""

    metrics: list[Metrics] = field(default_factory=list)
    rejected: list[Phase] = field(default_factory=list)


class ReportScanner:
    """Single-pass scanner that splits a report into phase blocks.

    While seeking a header, lines that do not name a phase are skipped.
    Inside a block, every line goes to the block parser until the
    terminator; end of input closes an open block the same way.
    """

    def __init__(self) -> None:
        self.state = ScanState.SEEKING_HEADER
        self.result = ScanResult()
        self._block: MetricsBlockParser | None = None

    def feed(self, line: str) -> Metrics | None:
        """Consume one line. Returns Metrics when a valid block just closed."""
        if self.state is ScanState.SEEKING_HEADER:
            phase = match_phase(line)
            if phase is not None:
                self._block = MetricsBlockParser(phase)
                self.state = ScanState.IN_BLOCK
            return None

        assert self._block is not None
        if self._block.feed(line):
            return self._close_block()
        return None

    def finish(self) -> Metrics | None:
        """Signal end of input, closing any open block."""
        if self.state is ScanState.IN_BLOCK:
            return self._close_block()
        return None

    def _close_block(self) -> Metrics | None:
        assert self._block is not None
        block = self._block
        self._block = None
        self.state = ScanState.SEEKING_HEADER

        metrics = block.result()
        if metrics is None:
            missing = [name for _, name, _ in FIELD_PARSERS if name not in block.values]
            logger.debug(f"Rejected {block.phase.value} block, missing: {', '.join(missing)}")
            self.result.rejected.append(block.phase)
        else:
            self.result.metrics.append(metrics)
        return metrics


def scan_report(
    lines: Iterable[str],
    on_metrics: Callable[[Metrics], None] | None = None,
) -> ScanResult:
    """Scan a report for phase blocks.

    Args:
        lines: Report lines (an open file or str.splitlines())
        on_metrics: Called with each accepted Metrics as soon as its block closes

    Returns:
        ScanResult with accepted Metrics in report order and rejected phases
    """
    scanner = ReportScanner()
    for line in lines:
        metrics = scanner.feed(line)
        if metrics is not None and on_metrics is not None:
            on_metrics(metrics)
    metrics = scanner.finish()
    if metrics is not None and on_metrics is not None:
        on_metrics(metrics)
    return scanner.result
