"""Incremental per-phase running averages."""

from collections.abc import Iterator

from ..models import Metrics, Phase, PhaseAverage

FLOAT_FIELDS = ("user_time_ms", "system_time_ms", "wall_clock_ms", "cpu_usage_pct")


def incremental_mean(old_avg: float, weight: int, value: float) -> float:
    """Fold value into an average that already represents weight observations."""
    if weight == 0:
        return value
    return (weight * old_avg + value) / (weight + 1)


def update_average(average: PhaseAverage, metrics: Metrics, iteration: int) -> None:
    """Fold one observation into a phase average in place.

    The weight is the global iteration index minus one, not the number of
    observations this phase has actually had. A phase missing from earlier
    iterations is therefore averaged as if it had reported zeros for them.

    Max RSS uses integer division by the iteration index and truncates.

    Args:
        average: Running average for metrics.name, mutated in place
        metrics: Accepted observation
        iteration: 1-based global iteration index
    """
    weight = iteration - 1
    for name in FLOAT_FIELDS:
        new_avg = incremental_mean(getattr(average, name), weight, getattr(metrics, name))
        setattr(average, name, new_avg)
    average.max_rss_bytes = (weight * average.max_rss_bytes + metrics.max_rss_bytes) // iteration
    average.observations += 1


class RunningAverageAccumulator:
    """Owns one PhaseAverage per phase for the lifetime of a run."""

    def __init__(self) -> None:
        self.averages: dict[Phase, PhaseAverage] = {
            phase: PhaseAverage(name=phase) for phase in Phase
        }

    def update(self, phase: Phase, metrics: Metrics, iteration: int) -> PhaseAverage:
        """Fold metrics into the average for phase and return it."""
        average = self.averages[phase]
        update_average(average, metrics, iteration)
        return average

    def get(self, phase: Phase) -> PhaseAverage:
        return self.averages[phase]

    def __iter__(self) -> Iterator[PhaseAverage]:
        return iter(self.averages.values())
