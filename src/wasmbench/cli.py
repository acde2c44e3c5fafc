"""wasmbench CLI: repeated benchmark runs with per-phase averages."""

from pathlib import Path

import typer

from wasmbench import __version__

from .config import BenchConfig, ConfigError, load_config, write_config_template
from .constants import DEFAULT_CONFIG_NAME
from .core import IterationDriver, OutputError, create_run_directory, scan_report
from .logging import configure_logging
from .output import OutputContext, get_output_context, metrics_table, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wasmbench {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="wasmbench",
    help="Run a benchmark repeatedly and average its per-phase metrics",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v, -vv)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only show warnings and errors",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """wasmbench - benchmark iteration and metrics aggregation."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))


def _load_config_or_exit(ctx: OutputContext, config_path: Path) -> BenchConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None


# ============================================================================
# wasmbench run
# ============================================================================


RUN_USAGE = "Usage: wasmbench run <num_iterations> <enable_stack_trace>"


def _parse_run_args(
    ctx: OutputContext, iterations: str | None, trace: str | None
) -> tuple[int, bool]:
    """Validate the positional run arguments, exiting 1 on any error."""
    if iterations is None or trace is None:
        ctx.error(RUN_USAGE)
        raise typer.Exit(1)

    try:
        count = int(iterations)
    except ValueError:
        count = 0
    if count <= 0:
        ctx.error(f"Number of iterations must be a positive integer, got {iterations!r}")
        raise typer.Exit(1)

    try:
        enable_trace = int(trace) != 0
    except ValueError:
        ctx.error(f"Stack trace flag must be an integer, got {trace!r}")
        raise typer.Exit(1) from None

    return count, enable_trace


@app.command("run", context_settings={"ignore_unknown_options": True})
def run(
    iterations: str | None = typer.Argument(
        None, help="Number of benchmark iterations", show_default=False
    ),
    trace: str | None = typer.Argument(
        None, help="Nonzero enables backtraces in the benchmark", show_default=False
    ),
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME),
        "--config",
        "-c",
        help="Path to config file",
    ),
) -> None:
    """Run the benchmark ITERATIONS times and write CSVs plus a summary."""
    ctx = get_output_context()
    count, enable_trace = _parse_run_args(ctx, iterations, trace)
    config = _load_config_or_exit(ctx, config_path)

    try:
        run_dir = create_run_directory(config.output.root)
        driver = IterationDriver.from_config(config, run_dir, enable_trace=enable_trace)
        averages = driver.run(count)
    except OutputError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    ctx.print("Benchmarking completed. CSV files generated")
    ctx.print_table(metrics_table("Average Metrics", list(averages.values())))
    ctx.success(
        f"Summary written to {driver.summary_path}",
        {
            "run_dir": str(run_dir),
            "iterations": driver.iteration,
            "scanned": driver.accepted,
            "skipped": driver.skipped,
            "averages": {
                phase.value: average.model_dump(mode="json", exclude={"name"})
                for phase, average in averages.items()
            },
        },
    )


# ============================================================================
# wasmbench parse
# ============================================================================


@app.command("parse")
def parse(
    report: Path = typer.Argument(..., help="Benchmark report to scan"),
) -> None:
    """Scan an existing report and show the metrics it contains."""
    ctx = get_output_context()

    try:
        with open(report, encoding="utf-8", errors="replace") as f:
            result = scan_report(f)
    except OSError as e:
        ctx.error(f"Cannot read report {report}: {e.strerror or e}")
        raise typer.Exit(1) from None

    ctx.print_table(metrics_table(f"Metrics in {report.name}", result.metrics))
    if result.rejected:
        ctx.print(f"Discarded {len(result.rejected)} incomplete block(s)", style="yellow")
    ctx.print_json(
        {
            "metrics": [m.model_dump(mode="json") for m in result.metrics],
            "rejected": [phase.value for phase in result.rejected],
        }
    )


# ============================================================================
# wasmbench init
# ============================================================================


@app.command("init")
def init(
    config_path: Path = typer.Option(
        Path(DEFAULT_CONFIG_NAME),
        "--config",
        "-c",
        help="Where to write the config template",
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing config"),
) -> None:
    """Write a default config file."""
    ctx = get_output_context()

    if config_path.exists() and not force:
        ctx.error(f"Config already exists: {config_path} (use --force to overwrite)")
        raise typer.Exit(1)

    write_config_template(config_path)
    ctx.success(f"Created config template: {config_path}", {"path": str(config_path)})


if __name__ == "__main__":
    app()
