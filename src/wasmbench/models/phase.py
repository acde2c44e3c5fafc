"""Benchmark phases tracked across iterations."""

from enum import Enum


class Phase(str, Enum):
    """Named stages of the benchmarked workload.

    Member order is the order phases appear in the summary report and the
    order header substrings are tried while scanning.
    """

    LOAD_MODEL = "loadmodel"
    READ_IMAGE = "readimg"
    RED_BOX = "redbox"
    PRE_PROCESSING = "readimg_greenbox"
    INFERENCE = "inference"
    POST_PROCESSING = "postprocessing"
    GREEN_BOX = "greenbox"
    TOTAL = "total"

    @property
    def headers(self) -> tuple[str, ...]:
        """Header substrings that introduce this phase's block in a report."""
        return _HEADERS[self]

    @property
    def display_name(self) -> str:
        """Name used in the summary report."""
        return _DISPLAY_NAMES[self]

    @property
    def csv_name(self) -> str:
        """File name of this phase's per-iteration CSV."""
        return f"{self.value}.csv"

    def matches(self, line: str) -> bool:
        """Return True if line is a header for this phase."""
        return any(header in line for header in self.headers)


_HEADERS: dict[Phase, tuple[str, ...]] = {
    Phase.LOAD_MODEL: ("Load Model Metrics", "loadmodel Metrics"),
    Phase.READ_IMAGE: ("Read Image Metrics", "readimg Metrics"),
    Phase.RED_BOX: ("Red Box Phase Metrics", "RED BOX Phase Metrics"),
    Phase.PRE_PROCESSING: ("Pre-processing Metrics",),
    Phase.INFERENCE: ("Inference Metrics",),
    Phase.POST_PROCESSING: ("Post-processing Metrics",),
    Phase.GREEN_BOX: ("Green Box Phase Metrics", "GREEN BOX Phase Metrics"),
    Phase.TOTAL: ("Total Metrics",),
}

_DISPLAY_NAMES: dict[Phase, str] = {
    Phase.LOAD_MODEL: "Load Model",
    Phase.READ_IMAGE: "Read Image (Red Box)",
    Phase.RED_BOX: "Red Box",
    Phase.PRE_PROCESSING: "Read Image (Green Box)",
    Phase.INFERENCE: "Inference",
    Phase.POST_PROCESSING: "Postprocessing",
    Phase.GREEN_BOX: "Green Box",
    Phase.TOTAL: "Total",
}


def match_phase(line: str) -> Phase | None:
    """Return the first phase whose header appears in line, if any."""
    for phase in Phase:
        if phase.matches(line):
            return phase
    return None
