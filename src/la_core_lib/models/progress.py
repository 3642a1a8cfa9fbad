"""Progress result models.

ProgressResult is the service-set classification and weighted score of one
case. SkippedRecord is the non-fatal diagnostic emitted for each malformed
input record.
"""

from enum import Enum
from typing import List

from pydantic import Field

from la_core_lib.models.common import EngineModel
from la_core_lib.models.services import ServiceType


class ProgressResult(EngineModel):
    """
    Completion classification for one case snapshot.

    Every required service of the category is in exactly one of
    completed_services / remaining_services. Lists carry no duplicates and
    follow catalog order.
    """

    total_progress: int = Field(
        ge=0,
        le=100,
        description="Weighted completion over required services (0-100)"
    )

    completed_services: List[ServiceType] = Field(
        default_factory=list,
        description="Distinct catalog services with at least one completed record"
    )

    remaining_services: List[ServiceType] = Field(
        default_factory=list,
        description="Required services with no completed record"
    )

    optional_services_completed: List[ServiceType] = Field(
        default_factory=list,
        description="Optional services with at least one completed record (bonus credit)"
    )

    @property
    def ready_for_review(self) -> bool:
        """True when no required service remains - the 'ready for review' trigger"""
        return not self.remaining_services


class MalformedReason(str, Enum):
    """Why a record was excluded from progress and timeline"""
    UNKNOWN_SERVICE_TYPE = "unknown_service_type"
    INVALID_TIME_WINDOW = "invalid_time_window"  # end_time earlier than start_time


class SkippedRecord(EngineModel):
    """A malformed record left out of the calculation"""

    record_id: str = Field(description="Id of the skipped record")
    service_type: str = Field(description="Service type exactly as supplied")
    reason: MalformedReason
