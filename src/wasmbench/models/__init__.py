"""Pydantic data models for wasmbench.

- Phase: the enumerated benchmark stages and their report/file naming
- Metrics: one parsed observation of a phase
- PhaseAverage: the running average kept per phase
"""

from .metrics import Metrics, PhaseAverage
from .phase import Phase, match_phase

__all__ = [
    "Metrics",
    "Phase",
    "PhaseAverage",
    "match_phase",
]
