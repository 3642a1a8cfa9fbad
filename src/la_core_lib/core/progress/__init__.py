"""Progress Calculation Package

Weighted completion scoring of a case's service records.
"""

from .progress_calculator import (
    ProgressCalculator,
    ProgressOutcome,
    screen_records,
    weighted_percentage,
)

__all__ = [
    "ProgressCalculator",
    "ProgressOutcome",
    "screen_records",
    "weighted_percentage",
]
