"""Core report parsing and aggregation for wasmbench.

This package contains the logic that turns benchmark reports into
per-phase CSV rows and running averages, separated from the CLI in cli.py.
"""

from .averages import RunningAverageAccumulator, incremental_mean, update_average
from .driver import BenchmarkRunner, IterationDriver, make_runner
from .report_parser import (
    MetricsBlockParser,
    ReportScanner,
    ScanResult,
    ScanState,
    parse_cpu_value,
    parse_metrics_block,
    parse_rss_value,
    parse_time_value,
    scan_report,
)
from .run_dir import create_run_directory, get_run_dir
from .writers import (
    CsvWriter,
    OutputError,
    format_csv_row,
    render_summary,
    write_summary,
)

__all__ = [
    "BenchmarkRunner",
    "CsvWriter",
    "IterationDriver",
    "MetricsBlockParser",
    "OutputError",
    "ReportScanner",
    "RunningAverageAccumulator",
    "ScanResult",
    "ScanState",
    "create_run_directory",
    "format_csv_row",
    "get_run_dir",
    "incremental_mean",
    "make_runner",
    "parse_cpu_value",
    "parse_metrics_block",
    "parse_rss_value",
    "parse_time_value",
    "render_summary",
    "scan_report",
    "update_average",
    "write_summary",
]
