"""User-facing output for wasmbench commands.

In human mode results go to the rich console shared with logging. With
``--json`` that text is suppressed and each command prints a single JSON
document on stdout for scripts collecting benchmark averages.
"""

import json
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.table import Table

from .models import Metrics, PhaseAverage


def metrics_table(title: str, rows: list[Metrics] | list[PhaseAverage]) -> Table:
    """One row per phase, formatted like the CSV and summary files."""
    table = Table(title=title)
    table.add_column("Phase")
    for heading in ("Wall clock (ms)", "User (ms)", "System (ms)", "CPU", "Max RSS"):
        table.add_column(heading, justify="right")
    for row in rows:
        table.add_row(
            row.name.display_name,
            f"{row.wall_clock_ms:.3f}",
            f"{row.user_time_ms:.3f}",
            f"{row.system_time_ms:.3f}",
            f"{row.cpu_usage_pct:.2f}%",
            str(row.max_rss_bytes),
        )
    return table


@dataclass
class OutputContext:
    console: Console
    json_mode: bool = False

    def print(self, message: str, style: str | None = None) -> None:
        if not self.json_mode:
            self.console.print(message, style=style)

    def print_table(self, table: Table) -> None:
        if not self.json_mode:
            self.console.print(table)

    def print_json(self, data: dict[str, Any]) -> None:
        """Write data to stdout; a no-op outside JSON mode."""
        if self.json_mode:
            print(json.dumps(data, indent=2, default=str))

    def error(self, message: str) -> None:
        """Explain why the command is about to exit nonzero."""
        if self.json_mode:
            self.print_json({"error": message})
        else:
            # Paths and user arguments may contain [brackets]
            self.console.print(f"Error: {message}", style="red", markup=False)

    def success(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Report a finished command. In JSON mode, data carries its results."""
        if self.json_mode:
            self.print_json({"success": message, **(data or {})})
        else:
            self.console.print(message, style="green", markup=False)


# Set once per invocation by the CLI callback
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Current context, or a plain stderr console before the CLI set one."""
    if _ctx is None:
        return OutputContext(Console(stderr=True))
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    global _ctx
    _ctx = ctx
