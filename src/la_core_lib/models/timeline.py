"""Timeline models - branching view of a case's service history.

Structure:
- TimelineTraffic
  - main_branch: critical path of required legal work
  - parallel_branches: one per service type of off-path work
  - merge_points: events where work from another branch converges

Serialized as-is (camelCase) for client-side visualization.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from la_core_lib.models.common import EngineModel
from la_core_lib.models.services import ServiceType


class TimelineStatus(str, Enum):
    """Display status for events and branches"""
    COMPLETED = "completed"
    IN_PROGRESS = "in-progress"
    PENDING = "pending"
    BLOCKED = "blocked"


class TimelineEvent(EngineModel):
    """One visual node on the timeline"""

    id: str = Field(description="Event id (the source record id, or pending-<service> for placeholders)")
    title: str
    description: str = ""
    status: TimelineStatus
    date: datetime = Field(description="Record end time if present, else start time")
    service_type: ServiceType
    duration: Optional[int] = Field(
        default=None,
        description="Elapsed seconds, None unless both start and end are known"
    )
    dependencies: List[str] = Field(
        default_factory=list,
        description="Ids of events this one follows"
    )


class TimelineBranch(EngineModel):
    """Ordered track of events"""

    id: str
    title: str
    events: List[TimelineEvent] = Field(default_factory=list)
    status: TimelineStatus = TimelineStatus.PENDING
    progress: int = Field(
        default=0,
        ge=0,
        le=100,
        description="Weighted completion over this branch's events"
    )

    @property
    def event_ids(self) -> List[str]:
        return [event.id for event in self.events]


class MergePoint(EngineModel):
    """An event that consumes work from other branches"""

    event_id: str
    branch_ids: List[str] = Field(
        description="Branches holding the event's dependencies, main branch first"
    )


class TimelineTraffic(EngineModel):
    """Branch/merge structure synthesized from a flat event log"""

    main_branch: TimelineBranch
    parallel_branches: List[TimelineBranch] = Field(default_factory=list)
    merge_points: List[MergePoint] = Field(default_factory=list)

    def all_branches(self) -> List[TimelineBranch]:
        """Main branch followed by parallel branches"""
        return [self.main_branch, *self.parallel_branches]

    def branch_of(self, event_id: str) -> Optional[TimelineBranch]:
        """Get the branch holding an event, or None"""
        for branch in self.all_branches():
            if event_id in branch.event_ids:
                return branch
        return None
