"""External process integrations for wasmbench.

- benchmark: launches the benchmark host and captures its report
"""

from .benchmark import BenchmarkError, build_env, run_benchmark

__all__ = [
    "BenchmarkError",
    "build_env",
    "run_benchmark",
]
