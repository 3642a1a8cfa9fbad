"""
Shared data models for the legal-aid case progress engine.

This package provides the Pydantic models exchanged between the engine and
its collaborators (case storage, notification dispatch, client views).
"""

from la_core_lib.models.services import (
    ServiceType,
    CaseCategory,
    RecordStatus,
    ServiceRecord,
)
from la_core_lib.models.progress import (
    ProgressResult,
    MalformedReason,
    SkippedRecord,
)
from la_core_lib.models.timeline import (
    TimelineStatus,
    TimelineEvent,
    TimelineBranch,
    MergePoint,
    TimelineTraffic,
)
from la_core_lib.models.report import (
    CaseProgressReport,
    PortfolioSummary,
)

__all__ = [
    # Inputs
    "ServiceType", "CaseCategory", "RecordStatus", "ServiceRecord",
    # Progress
    "ProgressResult", "MalformedReason", "SkippedRecord",
    # Timeline
    "TimelineStatus", "TimelineEvent", "TimelineBranch", "MergePoint",
    "TimelineTraffic",
    # Reports
    "CaseProgressReport", "PortfolioSummary",
]
