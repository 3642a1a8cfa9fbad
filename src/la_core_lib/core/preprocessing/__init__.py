"""Time Entry Preprocessing Package

Reduces stored time entries to engine ServiceRecords.
"""

from .time_entry_normalizer import (
    TimeEntryPayload,
    infer_service_type,
    normalize_time_entry,
    normalize_time_entries,
)

__all__ = [
    "TimeEntryPayload",
    "infer_service_type",
    "normalize_time_entry",
    "normalize_time_entries",
]
