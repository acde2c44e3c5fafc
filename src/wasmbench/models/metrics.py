"""Metrics models for per-phase observations and running averages."""

from pydantic import BaseModel, Field

from .phase import Phase


class Metrics(BaseModel):
    """One observation of one phase in one iteration.

    Only ever constructed from a block where all five fields were parsed.

    Attributes:
        name: Phase the observation belongs to
        user_time_ms: CPU time spent in user mode
        system_time_ms: CPU time spent in kernel mode
        wall_clock_ms: Elapsed real time
        cpu_usage_pct: CPU utilisation over the phase
        max_rss_bytes: Peak resident set size
    """

    name: Phase
    user_time_ms: float = Field(description="User time in ms")
    system_time_ms: float = Field(description="System time in ms")
    wall_clock_ms: float = Field(description="Wall clock time in ms")
    cpu_usage_pct: float = Field(description="CPU usage percentage")
    max_rss_bytes: int = Field(description="Max resident set size in bytes")


class PhaseAverage(BaseModel):
    """Running average for one phase.

    Starts at zero and is updated in place as observations are accepted;
    no raw observations are kept.
    """

    name: Phase
    user_time_ms: float = 0.0
    system_time_ms: float = 0.0
    wall_clock_ms: float = 0.0
    cpu_usage_pct: float = 0.0
    max_rss_bytes: int = 0
    observations: int = Field(default=0, description="Accepted blocks so far")
