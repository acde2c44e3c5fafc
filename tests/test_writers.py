"""Tests for CSV and summary writers."""

from pathlib import Path
from unittest.mock import Mock

import pytest

from wasmbench.core.averages import RunningAverageAccumulator
from wasmbench.core.writers import (
    CsvWriter,
    OutputError,
    format_csv_row,
    render_phase_summary,
    render_summary,
    write_summary,
)
from wasmbench.models import Metrics, Phase, PhaseAverage

HEADER = "user_time,system_time,cpu_percent,wallclock_time,max_rss"


def make_metrics(phase: Phase = Phase.INFERENCE) -> Metrics:
    return Metrics(
        name=phase,
        user_time_ms=12.3456,
        system_time_ms=1.2,
        wall_clock_ms=20.001,
        cpu_usage_pct=55.5,
        max_rss_bytes=4096,
    )


class TestFormatCsvRow:
    """Tests for format_csv_row."""

    def test_formats_each_field(self) -> None:
        assert ",".join(format_csv_row(make_metrics())) == "12.346,1.200,55.50%,20.001,4096"

    def test_zero_values(self) -> None:
        row = format_csv_row(PhaseAverage(name=Phase.TOTAL))
        assert row == ["0.000", "0.000", "0.00%", "0.000", "0"]


class TestCsvWriter:
    """Tests for CsvWriter."""

    def test_creates_one_file_per_phase_with_header(self, tmp_path: Path) -> None:
        with CsvWriter(tmp_path):
            pass
        for phase in Phase:
            path = tmp_path / phase.csv_name
            assert path.read_text() == f"{HEADER}\n"

    def test_file_names(self, tmp_path: Path) -> None:
        with CsvWriter(tmp_path):
            pass
        names = sorted(p.name for p in tmp_path.iterdir())
        assert names == sorted(
            [
                "loadmodel.csv",
                "readimg.csv",
                "redbox.csv",
                "readimg_greenbox.csv",
                "inference.csv",
                "postprocessing.csv",
                "greenbox.csv",
                "total.csv",
            ]
        )

    def test_write_appends_row_to_phase_file(self, tmp_path: Path) -> None:
        with CsvWriter(tmp_path) as writer:
            writer.write(make_metrics(Phase.INFERENCE))
            writer.write(make_metrics(Phase.INFERENCE))
        lines = (tmp_path / "inference.csv").read_text().splitlines()
        row = "12.346,1.200,55.50%,20.001,4096"
        assert lines == [HEADER, row, row]
        assert (tmp_path / "total.csv").read_text() == f"{HEADER}\n"

    def test_header_written_once_when_reopened(self, tmp_path: Path) -> None:
        """Invariant: appending to an existing file does not repeat the header."""
        with CsvWriter(tmp_path, phases=[Phase.TOTAL]) as writer:
            writer.write(make_metrics(Phase.TOTAL))
        with CsvWriter(tmp_path, phases=[Phase.TOTAL]) as writer:
            writer.write(make_metrics(Phase.TOTAL))
        lines = (tmp_path / "total.csv").read_text().splitlines()
        assert lines.count(HEADER) == 1
        assert len(lines) == 3

    def test_close_releases_handles(self, tmp_path: Path) -> None:
        writer = CsvWriter(tmp_path)
        writer.open()
        assert not writer.closed
        writer.close()
        assert writer.closed

    def test_open_failure_raises_output_error(self, tmp_path: Path) -> None:
        missing = tmp_path / "does-not-exist"
        writer = CsvWriter(missing)
        with pytest.raises(OutputError, match="Failed to open CSV file"):
            writer.open()
        assert writer.closed

    def test_partial_open_failure_closes_opened_files(self, tmp_path: Path) -> None:
        """A CSV path occupied by a directory fails after earlier files opened."""
        (tmp_path / Phase.TOTAL.csv_name).mkdir()
        writer = CsvWriter(tmp_path)
        with pytest.raises(OutputError):
            writer.open()
        assert writer.closed
        assert (tmp_path / Phase.LOAD_MODEL.csv_name).exists()

    def test_row_write_failure_raises_output_error(self, tmp_path: Path) -> None:
        writer = CsvWriter(tmp_path, phases=[Phase.TOTAL])
        writer.open()
        writer._files[Phase.TOTAL].close()
        writer._files[Phase.TOTAL] = Mock(**{"write.side_effect": OSError(28, "No space left")})
        with pytest.raises(OutputError, match="Failed to write CSV file .*total.csv"):
            writer.write(make_metrics(Phase.TOTAL))
        writer.close()
        assert writer.closed


class TestSummary:
    """Tests for summary rendering."""

    def test_phase_block_format(self) -> None:
        average = PhaseAverage(
            name=Phase.LOAD_MODEL,
            user_time_ms=12.3456,
            system_time_ms=1.2,
            wall_clock_ms=20.001,
            cpu_usage_pct=55.5,
            max_rss_bytes=4096,
        )
        assert render_phase_summary(average) == (
            "====Load Model Metrics====\n"
            "Average Wall Clock Time: 20.001 ms\n"
            "Average User Time: 12.346 ms\n"
            "Average System Time: 1.200 ms\n"
            "Average Cpu Usage: 55.50 %\n"
            "Average Max RSS: 4096\n"
        )

    def test_phases_in_fixed_order_separated_by_blank_line(self) -> None:
        text = render_summary(RunningAverageAccumulator())
        headers = [line for line in text.splitlines() if line.startswith("====")]
        assert headers == [
            "====Load Model Metrics====",
            "====Read Image (Red Box) Metrics====",
            "====Red Box Metrics====",
            "====Read Image (Green Box) Metrics====",
            "====Inference Metrics====",
            "====Postprocessing Metrics====",
            "====Green Box Metrics====",
            "====Total Metrics====",
        ]
        assert text.count("\n\n") == len(Phase)
        assert text.endswith("Average Max RSS: 0\n\n")

    def test_order_independent_of_input_order(self) -> None:
        averages = [PhaseAverage(name=phase) for phase in reversed(list(Phase))]
        assert render_summary(averages) == render_summary(RunningAverageAccumulator())

    def test_write_overwrites_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "stats_summary.txt"
        path.write_text("stale benchmark output\n" * 50)
        write_summary(path, RunningAverageAccumulator())
        assert path.read_text() == render_summary(RunningAverageAccumulator())

    def test_write_is_byte_identical_for_identical_input(self, tmp_path: Path) -> None:
        first = tmp_path / "a.txt"
        second = tmp_path / "b.txt"
        accumulator = RunningAverageAccumulator()
        accumulator.update(Phase.TOTAL, make_metrics(Phase.TOTAL), iteration=1)
        write_summary(first, accumulator)
        write_summary(second, accumulator)
        assert first.read_bytes() == second.read_bytes()

    def test_write_failure_raises_output_error(self, tmp_path: Path) -> None:
        with pytest.raises(OutputError, match="Failed to write summary"):
            write_summary(tmp_path / "missing" / "summary.txt", RunningAverageAccumulator())
