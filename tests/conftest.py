"""Shared test fixtures for wasmbench tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from typer.testing import CliRunner

SEPARATOR = "=" * 39


def make_block(
    header: str,
    wall: str = "20.001ms",
    user: str = "12.3456ms",
    system: str = "1.2ms",
    cpu: str = "55.5%",
    rss: str = "4096 bytes",
) -> str:
    """Build one report block in the benchmark module's print format."""
    return (
        f"============= {header} =============\n"
        f"Wall Clock Time: {wall}\n"
        f"User time: {user}\n"
        f"System time: {system}\n"
        f"Max RSS: {rss}\n"
        f"CPU Usage: {cpu}\n"
        f"{SEPARATOR}\n"
    )


ALL_HEADERS = [
    "loadmodel Metrics",
    "readimg Metrics",
    "RED BOX Phase Metrics",
    "Pre-processing Metrics",
    "Inference Metrics",
    "Post-processing Metrics",
    "GREEN BOX Phase Metrics",
    "Total Metrics",
]


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_report() -> str:
    """Return a report with one complete block for every phase."""
    lines = [
        "Creating the Wasm environment took: 1.2ms",
        "Loading the Wasm module took: 300ms",
        "",
    ]
    body = "".join(make_block(header) for header in ALL_HEADERS)
    return "\n".join(lines) + "\n" + body + "Predicted Class Index: 208\n"


class FakeBenchmark:
    """Stands in for the benchmark process.

    Each call consumes one (exit_code, report_text) outcome. A report of
    None leaves no report file behind.
    """

    def __init__(self, outcomes: list[tuple[int, str | None]]) -> None:
        self.outcomes = list(outcomes)
        self.calls: list[tuple[Path, bool]] = []

    def __call__(self, report_path: Path, enable_trace: bool) -> int:
        self.calls.append((report_path, enable_trace))
        exit_code, text = self.outcomes.pop(0)
        if text is None:
            report_path.unlink(missing_ok=True)
        else:
            report_path.write_text(text, encoding="utf-8")
        return exit_code


@pytest.fixture
def fake_benchmark() -> Callable[[list[tuple[int, str | None]]], FakeBenchmark]:
    """Factory for FakeBenchmark runners."""
    return FakeBenchmark


@pytest.fixture
def block() -> Callable[..., str]:
    """Factory for single report blocks."""
    return make_block
