"""Time Entry Normalization Module

Purpose: Reduce stored time entries to ServiceRecord inputs for the engine

The case-management app stores lawyers' time entries with camelCase keys and
an optional serviceType. Older entries have no service type at all, only a
free-text description; for those the type is inferred from keywords.

Key Functions:
- infer_service_type(): Keyword-based service type from a description
- normalize_time_entry(): One stored entry -> ServiceRecord
- normalize_time_entries(): Batch version, preserving input order
"""

import logging
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Union

from typing_extensions import NotRequired, TypedDict

from la_core_lib.models.services import RecordStatus, ServiceRecord, ServiceType

logger = logging.getLogger(__name__)


class TimeEntryPayload(TypedDict):
    """Stored time entry shape as read from the case store"""

    id: str
    status: str
    description: NotRequired[Optional[str]]
    serviceType: NotRequired[Optional[str]]
    startTime: NotRequired[Optional[Union[str, datetime]]]
    endTime: NotRequired[Optional[Union[str, datetime]]]
    createdAt: NotRequired[Optional[Union[str, datetime]]]
    dependsOn: NotRequired[Optional[List[str]]]
    title: NotRequired[Optional[str]]


# Checked in order; the first service type with a matching keyword wins
SERVICE_KEYWORDS: Dict[ServiceType, Sequence[str]] = {
    ServiceType.CONSULTATION: ("consult", "advice", "discuss", "meeting"),
    ServiceType.DOCUMENT_PREPARATION: ("draft", "prepare", "document", "file"),
    ServiceType.COURT_APPEARANCE: ("court", "hearing", "trial", "appear"),
    ServiceType.RESEARCH: ("research", "analyze", "review", "study"),
    ServiceType.COMMUNITY_OUTREACH: ("community", "outreach", "workshop", "education"),
    ServiceType.MEDIATION: ("mediate", "negotiate", "settle", "resolve"),
    ServiceType.CLIENT_MEETING: ("client", "meet", "interview", "conference"),
    ServiceType.CASE_REVIEW: ("review", "assess", "evaluate", "examine"),
}

DEFAULT_SERVICE_TYPE = ServiceType.CASE_REVIEW


def infer_service_type(description: Optional[str]) -> ServiceType:
    """
    Infer a service type from a time entry description.

    Args:
        description: Free-text description of the work

    Returns:
        First ServiceType whose keywords occur in the description,
        DEFAULT_SERVICE_TYPE when none do
    """
    text = (description or "").lower()
    for service_type, keywords in SERVICE_KEYWORDS.items():
        if any(keyword in text for keyword in keywords):
            return service_type
    return DEFAULT_SERVICE_TYPE


def normalize_time_entry(entry: TimeEntryPayload) -> ServiceRecord:
    """
    Convert one stored time entry into a ServiceRecord.

    - Missing/blank serviceType is inferred from the description
    - An unrecognized serviceType is passed through unchanged (the engine
      reports it as skipped)
    - startTime falls back to createdAt

    Args:
        entry: Stored time entry

    Returns:
        ServiceRecord ready for compute_case_progress()

    Raises:
        ValueError: If neither startTime nor createdAt is present, or the
            status is not a known record status
    """
    service_type = (entry.get("serviceType") or "").strip()
    if not service_type:
        inferred = infer_service_type(entry.get("description"))
        logger.debug(f"Inferred service type {inferred.value} for time entry {entry.get('id')}")
        service_type = inferred.value

    start_time = entry.get("startTime") or entry.get("createdAt")
    if start_time is None:
        raise ValueError(f"Time entry {entry.get('id')} has neither startTime nor createdAt")

    return ServiceRecord(
        id=entry["id"],
        service_type=service_type,
        status=RecordStatus(entry["status"]),
        start_time=start_time,
        end_time=entry.get("endTime"),
        depends_on=entry.get("dependsOn"),
        title=entry.get("title"),
        description=entry.get("description"),
    )


def normalize_time_entries(entries: Iterable[TimeEntryPayload]) -> List[ServiceRecord]:
    """Normalize a batch of time entries, preserving order"""
    return [normalize_time_entry(entry) for entry in entries]
