"""Timeline Synthesis Package

Branch/merge timeline construction from a case's service records.
"""

from .timeline_synthesizer import (
    MAIN_BRANCH_ID,
    TimelineSynthesizer,
    placeholder_id,
)

__all__ = [
    "MAIN_BRANCH_ID",
    "TimelineSynthesizer",
    "placeholder_id",
]
