"""Iteration driver: run the benchmark repeatedly and aggregate its reports."""

import logging
from collections.abc import Callable
from functools import partial
from pathlib import Path

from ..config import BenchConfig
from ..models import Metrics, Phase, PhaseAverage
from ..services.benchmark import BenchmarkError, run_benchmark
from .averages import RunningAverageAccumulator
from .report_parser import scan_report
from .writers import CsvWriter, OutputError, write_summary

logger = logging.getLogger(__name__)

# (report_path, enable_trace) -> exit code; raises BenchmarkError if it cannot run
BenchmarkRunner = Callable[[Path, bool], int]


def make_runner(config: BenchConfig) -> BenchmarkRunner:
    """Bind the configured benchmark command into a runner."""
    return partial(run_benchmark, config.benchmark)


class IterationDriver:
    """Runs the benchmark N times, folding each report into the averages.

    The iteration counter advances on every pass, including passes whose
    process failed or left no readable report; it is the averaging weight.

    Attributes:
        run_dir: Directory holding CSVs, the report and the summary
        iteration: Number of loop passes started so far
        accepted: Iterations whose report was scanned
        skipped: Iterations that contributed nothing
    """

    def __init__(
        self,
        run_dir: Path,
        runner: BenchmarkRunner,
        *,
        enable_trace: bool = False,
        summary_name: str = "stats_summary.txt",
        report_name: str = "report.txt",
    ) -> None:
        self.run_dir = run_dir
        self.runner = runner
        self.enable_trace = enable_trace
        self.summary_path = run_dir / summary_name
        self.report_path = run_dir / report_name
        self.accumulator = RunningAverageAccumulator()
        self.csv_writer = CsvWriter(run_dir)
        self.iteration = 0
        self.accepted = 0
        self.skipped = 0

    @classmethod
    def from_config(
        cls, config: BenchConfig, run_dir: Path, enable_trace: bool
    ) -> "IterationDriver":
        return cls(
            run_dir,
            make_runner(config),
            enable_trace=enable_trace,
            summary_name=config.output.summary_name,
            report_name=config.output.report_name,
        )

    def prepare(self) -> None:
        """Open every output file before the first iteration.

        Raises:
            OutputError: If a CSV or the summary file cannot be created
        """
        self.csv_writer.open()
        try:
            self.summary_path.touch()
        except OSError as e:
            self.csv_writer.close()
            raise OutputError(f"Failed to create summary {self.summary_path}: {e}") from e

    def run_iteration(self) -> bool:
        """Run one pass. Returns True if a report was scanned."""
        self.iteration += 1
        logger.info(f"Running iteration {self.iteration}")

        try:
            exit_code = self.runner(self.report_path, self.enable_trace)
        except BenchmarkError as e:
            logger.error(f"Iteration {self.iteration}: {e}")
            return False
        if exit_code != 0:
            logger.error(f"Command failed on iteration {self.iteration} (exit code {exit_code})")
            return False

        try:
            with open(self.report_path, encoding="utf-8", errors="replace") as report:
                result = scan_report(report, on_metrics=self._accept)
        except OSError as e:
            logger.warning(f"No report file found for iteration {self.iteration}: {e}")
            return False

        if result.rejected:
            names = ", ".join(phase.value for phase in result.rejected)
            logger.warning(f"Iteration {self.iteration}: discarded incomplete blocks: {names}")
        logger.debug(f"Iteration {self.iteration}: accepted {len(result.metrics)} blocks")
        return True

    def _accept(self, metrics: Metrics) -> None:
        self.accumulator.update(metrics.name, metrics, self.iteration)
        self.csv_writer.write(metrics)

    def run(self, iterations: int) -> dict[Phase, PhaseAverage]:
        """Run all iterations, then close the CSVs and write the summary.

        Args:
            iterations: Number of loop passes

        Returns:
            Final per-phase averages

        Raises:
            OutputError: If output files cannot be opened or written
        """
        self.prepare()
        try:
            for _ in range(iterations):
                if self.run_iteration():
                    self.accepted += 1
                else:
                    self.skipped += 1
        finally:
            self.csv_writer.close()

        write_summary(self.summary_path, self.accumulator)
        logger.info(f"Benchmarking completed: {self.accepted} scanned, {self.skipped} skipped")
        return self.accumulator.averages
