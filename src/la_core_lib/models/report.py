"""Engine output models.

CaseProgressReport bundles the progress classification and the timeline
built from the same record snapshot. PortfolioSummary aggregates reports
across a client's cases for dashboard display.
"""

from typing import Any, Dict, List

from pydantic import Field

from la_core_lib.models.common import EngineModel
from la_core_lib.models.progress import ProgressResult, SkippedRecord
from la_core_lib.models.services import CaseCategory
from la_core_lib.models.timeline import TimelineTraffic


class CaseProgressReport(EngineModel):
    """Combined result of one engine invocation"""

    category: CaseCategory
    progress: ProgressResult
    timeline: TimelineTraffic

    skipped: List[str] = Field(
        default_factory=list,
        description="Service type of each malformed record, in input order"
    )

    skipped_records: List[SkippedRecord] = Field(
        default_factory=list,
        description="Detailed diagnostics for skipped records"
    )

    out_of_catalog: List[str] = Field(
        default_factory=list,
        description="Ids of well-formed records whose service type is not configured for the category"
    )

    @property
    def ready_for_review(self) -> bool:
        """Check if every required service has a completed record"""
        return self.progress.ready_for_review

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible camelCase dict for client-side visualization"""
        return self.model_dump(mode="json", by_alias=True)


class PortfolioSummary(EngineModel):
    """Aggregate over several cases' reports"""

    total_cases: int = 0
    ready_for_review: int = Field(
        default=0,
        description="Cases with no remaining required services"
    )
    average_progress: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Mean total_progress, rounded half-up"
    )
