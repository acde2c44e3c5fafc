"""Benchmark process runner for wasmbench."""

import logging
import os
import subprocess
from pathlib import Path

from ..config import BenchmarkConfig

logger = logging.getLogger(__name__)


class BenchmarkError(Exception):
    """Benchmark process could not be launched or did not finish."""

    pass


def build_env(config: BenchmarkConfig, enable_trace: bool) -> dict[str, str]:
    """Environment for the benchmark process.

    The trace variable is set to "1" when tracing is enabled and removed
    otherwise, so an inherited value does not leak into untraced runs.
    """
    env = dict(os.environ)
    if enable_trace:
        env[config.trace_env] = "1"
    else:
        env.pop(config.trace_env, None)
    return env


def run_benchmark(config: BenchmarkConfig, report_path: Path, enable_trace: bool = False) -> int:
    """Run the benchmark once, writing its combined output to report_path.

    Args:
        config: Benchmark launch settings
        report_path: File receiving stdout and stderr (truncated first)
        enable_trace: Set the trace environment variable

    Returns:
        Process exit code

    Raises:
        BenchmarkError: If the command is missing, cannot be started, or times out
    """
    args = config.command()
    logger.debug(f"Running {' '.join(args)} in {config.workdir} (trace={enable_trace})")

    try:
        with open(report_path, "w", encoding="utf-8") as report:
            result = subprocess.run(
                args,
                cwd=config.workdir,
                env=build_env(config, enable_trace),
                stdout=report,
                stderr=subprocess.STDOUT,
                timeout=config.timeout,
            )
    except subprocess.TimeoutExpired as e:
        raise BenchmarkError(f"Benchmark timed out after {config.timeout} seconds") from e
    except FileNotFoundError:
        raise BenchmarkError(f"Command not found: {args[0]}") from None
    except OSError as e:
        raise BenchmarkError(f"Failed to run {args[0]}: {e}") from e

    return result.returncode
