"""Memory-state mapping and FSRS scheduling."""

from kairos.core.srs.memory_state import AlgorithmCardState, to_algorithm_input
from kairos.core.srs.scheduler import (
    FSRSAlgorithm,
    SchedulerAdapter,
    SchedulingAlgorithm,
    SchedulingOutcome,
    apply_outcome,
    parse_rating,
)

__all__ = [
    "AlgorithmCardState",
    "FSRSAlgorithm",
    "SchedulerAdapter",
    "SchedulingAlgorithm",
    "SchedulingOutcome",
    "apply_outcome",
    "parse_rating",
    "to_algorithm_input",
]
