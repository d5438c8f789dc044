"""Analysis utilities built on repeated simulation runs."""

from .comparison import (
    compare_configurations,
    evaluate_configuration,
    repeat_runs,
    sweep_chargepoint_counts,
)

__all__ = [
    "compare_configurations",
    "evaluate_configuration",
    "repeat_runs",
    "sweep_chargepoint_counts",
]
