"""Timeline Synthesizer

Purpose: Turn a flat, chronological service log into a branching timeline.

Steps:
1. Events: every well-formed, non-cancelled record configured for the
   category becomes a TimelineEvent (date = end else start).
2. Dependencies: explicit depends_on lists are taken as given. A required
   service record without one follows the latest completed required record
   before it, which gives simple cases a linear chain.
3. Main branch: the longest dependency chain through required-service
   events picks the root; every required event that reaches it joins.
4. Parallel branches: all other events, one branch per service type.
5. Merge points: events whose dependencies live on another branch.
6. Branch scoring: weighted completion and a derived status per branch.

Once any event exists, required services with no event at all are shown as
pending placeholders at the end of the main branch.

Output depends only on the record set: events are ordered by (date, id)
before anything else happens.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Union

from la_core_lib.catalog.service_catalog import CatalogEntry, ServiceCatalog
from la_core_lib.core.progress.progress_calculator import screen_records, weighted_percentage
from la_core_lib.models.common import round_half_up
from la_core_lib.models.progress import ProgressResult
from la_core_lib.models.services import CaseCategory, RecordStatus, ServiceRecord, ServiceType
from la_core_lib.models.timeline import (
    MergePoint,
    TimelineBranch,
    TimelineEvent,
    TimelineStatus,
    TimelineTraffic,
)

logger = logging.getLogger(__name__)

MAIN_BRANCH_ID = "main"
MAIN_BRANCH_TITLE = "Required Services"

_EVENT_STATUS = {
    RecordStatus.COMPLETED: TimelineStatus.COMPLETED,
    RecordStatus.IN_PROGRESS: TimelineStatus.IN_PROGRESS,
}


def _sort_key(record: ServiceRecord):
    return (record.effective_date, record.id, record.raw_service_type, record.status.value)


def placeholder_id(service_type: ServiceType) -> str:
    """Event id of the pending placeholder for a required service"""
    return f"pending-{service_type.value.lower().replace('_', '-')}"


class TimelineSynthesizer:
    """Builds TimelineTraffic from service records and their progress result.

    Usage:
        synthesizer = TimelineSynthesizer(catalog)
        timeline = synthesizer.synthesize(CaseCategory.FAMILY, records, outcome.result)
    """

    def __init__(self, catalog: ServiceCatalog):
        self.catalog = catalog

    def synthesize(
        self,
        category: Union[CaseCategory, str],
        records: Iterable[ServiceRecord],
        progress: ProgressResult,
    ) -> TimelineTraffic:
        """Synthesize the branching timeline.

        Args:
            category: Case category
            records: The same record snapshot the progress result was built from
            progress: ProgressResult for that snapshot

        Returns:
            TimelineTraffic with main branch, parallel branches and merge points

        Raises:
            UnknownCategoryError: If the category is not in the catalog
        """
        entry = self.catalog.required_and_optional(category)
        placed = self._placeable_records(entry, records)
        events = self._build_events(entry, placed)

        main_ids = self._main_branch_ids(entry, events)
        main_events = [e for e in events if e.id in main_ids]
        placeholders = self._pending_placeholders(events, main_events, progress)

        groups: Dict[ServiceType, List[TimelineEvent]] = {}
        for event in events:
            if event.id not in main_ids:
                groups.setdefault(event.service_type, []).append(event)

        all_events = events + placeholders
        completed_ids = {e.id for e in all_events if e.status == TimelineStatus.COMPLETED}

        main_branch = self._make_branch(
            MAIN_BRANCH_ID, MAIN_BRANCH_TITLE, main_events + placeholders, completed_ids
        )
        parallel_branches = [
            self._make_branch(service_type.value.lower(), service_type.value, group, completed_ids)
            for service_type, group in groups.items()
        ]

        merge_points = self._merge_points(all_events, [main_branch, *parallel_branches])

        logger.debug(
            f"Timeline synthesized: events={len(events)}, main={len(main_branch.events)}, "
            f"parallel={len(parallel_branches)}, merges={len(merge_points)}"
        )

        return TimelineTraffic(
            main_branch=main_branch,
            parallel_branches=parallel_branches,
            merge_points=merge_points,
        )

    # ============================================================
    # Step 1: placeable records
    # ============================================================

    def _placeable_records(self, entry: CatalogEntry, records: Iterable[ServiceRecord]) -> List[ServiceRecord]:
        valid, _ = screen_records(records)

        placed: List[ServiceRecord] = []
        seen_ids: Set[str] = set()
        for record in sorted(valid, key=_sort_key):
            if record.status == RecordStatus.CANCELLED:
                continue
            if entry.classify(record.service_type) is None:
                logger.warning(
                    f"Dropping record {record.id} from timeline: "
                    f"{record.service_type.value} is neither required nor optional for this category"
                )
                continue
            if record.id in seen_ids:
                logger.warning(f"Duplicate record id {record.id} on timeline, keeping the earliest")
                continue
            seen_ids.add(record.id)
            placed.append(record)

        return placed

    # ============================================================
    # Step 2: events and dependencies
    # ============================================================

    def _build_events(self, entry: CatalogEntry, ordered: List[ServiceRecord]) -> List[TimelineEvent]:
        events: List[TimelineEvent] = []
        last_completed_required: Optional[str] = None

        for record in ordered:
            is_required = record.service_type in entry.required

            if record.depends_on is not None:
                dependencies = [d for d in dict.fromkeys(record.depends_on) if d != record.id]
            elif is_required and last_completed_required is not None:
                dependencies = [last_completed_required]
            else:
                dependencies = []

            events.append(TimelineEvent(
                id=record.id,
                title=record.title or f"Service: {record.service_type.label}",
                description=record.description or "",
                status=_EVENT_STATUS[record.status],
                date=record.effective_date,
                service_type=record.service_type,
                duration=record.duration_seconds,
                dependencies=dependencies,
            ))

            if is_required and record.status == RecordStatus.COMPLETED:
                last_completed_required = record.id

        return events

    # ============================================================
    # Step 3: main branch
    # ============================================================

    def _main_branch_ids(self, entry: CatalogEntry, events: List[TimelineEvent]) -> Set[str]:
        """Ids of the required events that belong on the main branch.

        The longest required chain fixes the root. Every required event whose
        dependencies lead back to that root joins it; other required events
        are left for the parallel branches.
        """
        chain = self._critical_path(entry, events)
        if not chain:
            return set()

        position = {e.id: i for i, e in enumerate(events)}
        required = set(entry.required)
        root = min(chain, key=position.__getitem__)

        # events are in (date, id) order and only earlier dependencies count
        reaches: Set[str] = {root}
        for i, event in enumerate(events):
            if event.id in reaches:
                continue
            if any(dep in reaches and position[dep] < i for dep in event.dependencies):
                reaches.add(event.id)

        return {e.id for e in events if e.id in reaches and e.service_type in required}

    def _critical_path(self, entry: CatalogEntry, events: List[TimelineEvent]) -> Set[str]:
        """Ids on the longest chain of required events linked by dependencies.

        Only edges from an earlier to a later event count, so the graph is
        acyclic whatever the input says. Ties go to the earliest predecessor
        and the earliest chain end.
        """
        position = {e.id: i for i, e in enumerate(events)}
        required = set(entry.required)
        length: Dict[int, int] = {}
        previous: Dict[int, Optional[int]] = {}

        for i, event in enumerate(events):
            if event.service_type not in required:
                continue
            length[i] = 1
            previous[i] = None
            for dep in event.dependencies:
                j = position.get(dep)
                if j is None or j >= i or j not in length:
                    continue
                candidate = length[j] + 1
                if candidate > length[i] or (
                    candidate == length[i] and previous[i] is not None and j < previous[i]
                ):
                    length[i] = candidate
                    previous[i] = j

        if not length:
            return set()

        end = None
        for i in sorted(length):
            if end is None or length[i] > length[end]:
                end = i

        chain: Set[str] = set()
        cursor: Optional[int] = end
        while cursor is not None:
            chain.add(events[cursor].id)
            cursor = previous[cursor]
        return chain

    def _pending_placeholders(
        self,
        events: List[TimelineEvent],
        main_events: List[TimelineEvent],
        progress: ProgressResult,
    ) -> List[TimelineEvent]:
        if not events:
            return []

        covered = {e.service_type for e in events}
        anchor = [main_events[-1].id] if main_events else []
        date = max(e.date for e in events)

        return [
            TimelineEvent(
                id=placeholder_id(service_type),
                title=f"Pending {service_type.label.lower()}",
                description="Required service that needs to be completed",
                status=TimelineStatus.PENDING,
                date=date,
                service_type=service_type,
                dependencies=anchor,
            )
            for service_type in progress.remaining_services
            if service_type not in covered
        ]

    # ============================================================
    # Steps 5-6: merge points and branch scoring
    # ============================================================

    def _merge_points(self, events: List[TimelineEvent], branches: List[TimelineBranch]) -> List[MergePoint]:
        """Events with a dependency on another branch.

        branch_ids names every branch holding one of the event's
        dependencies, its own branch included when a dependency sits there.
        """
        home: Dict[str, str] = {}
        for branch in branches:
            for event in branch.events:
                home[event.id] = branch.id
        order = {branch.id: i for i, branch in enumerate(branches)}

        merge_points: List[MergePoint] = []
        for event in events:
            own = home.get(event.id)
            sources = {home[d] for d in event.dependencies if d in home}
            if sources - {own}:
                merge_points.append(MergePoint(
                    event_id=event.id,
                    branch_ids=sorted(sources, key=order.__getitem__),
                ))
        return merge_points

    def _make_branch(
        self,
        branch_id: str,
        title: str,
        events: List[TimelineEvent],
        completed_ids: Set[str],
    ) -> TimelineBranch:
        return TimelineBranch(
            id=branch_id,
            title=title,
            events=events,
            status=self._branch_status(events, completed_ids),
            progress=self._branch_progress(events),
        )

    def _branch_progress(self, events: List[TimelineEvent]) -> int:
        done = [e.service_type for e in events if e.status == TimelineStatus.COMPLETED]
        return round_half_up(weighted_percentage(self.catalog, done, [e.service_type for e in events]))

    @staticmethod
    def _branch_status(events: List[TimelineEvent], completed_ids: Set[str]) -> TimelineStatus:
        if not events:
            return TimelineStatus.PENDING
        if all(e.status == TimelineStatus.COMPLETED for e in events):
            return TimelineStatus.COMPLETED
        if any(e.status == TimelineStatus.IN_PROGRESS for e in events):
            return TimelineStatus.IN_PROGRESS
        if any(dep not in completed_ids for dep in events[0].dependencies):
            return TimelineStatus.BLOCKED
        return TimelineStatus.PENDING
