"""Configuration management for wasmbench."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import BENCHMARK_TIMEOUT


class ConfigError(Exception):
    """Configuration file could not be read or is invalid."""

    pass


class BenchmarkConfig(BaseModel):
    """How to launch the benchmark host process."""

    exec: str = "./wasmtime-test"  # Benchmark host executable
    args: list[str] = Field(default_factory=lambda: ["wasi-nn-module.wasm"])
    workdir: Path = Path("binaries")  # Working directory for the process
    trace_env: str = "RUST_BACKTRACE"  # Set to "1" when tracing is enabled
    timeout: int = Field(default=BENCHMARK_TIMEOUT, gt=0, description="Seconds per iteration")

    def command(self) -> list[str]:
        """Full argv for one benchmark invocation."""
        return [self.exec, *self.args]


class OutputConfig(BaseModel):
    """Where run artifacts are written."""

    root: Path = Path(".")  # Parent of the <date>/<time>/ run directories
    summary_name: str = "stats_summary.txt"
    report_name: str = "report.txt"


class BenchConfig(BaseModel):
    """Root configuration for wasmbench."""

    benchmark: BenchmarkConfig = Field(default_factory=BenchmarkConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def load_config(config_path: Path) -> BenchConfig:
    """Load config from a TOML file.

    Args:
        config_path: Path to the config file

    Returns:
        Loaded configuration, or defaults if the file doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    if not config_path.exists():
        return BenchConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return BenchConfig.model_validate(data)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e


def write_config_template(config_path: Path) -> Path:
    """Write default config template.

    Args:
        config_path: Destination file

    Returns:
        Path to the written config file
    """
    template = {
        "benchmark": {
            "exec": "./wasmtime-test",
            "args": ["wasi-nn-module.wasm"],
            "workdir": "binaries",
            "trace_env": "RUST_BACKTRACE",
            "timeout": BENCHMARK_TIMEOUT,
        },
        "output": {
            "root": ".",
            "summary_name": "stats_summary.txt",
            "report_name": "report.txt",
        },
    }
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
