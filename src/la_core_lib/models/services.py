"""Service record models - the engine's input vocabulary.

Key Models:
- ServiceType: Closed set of legal work units (consultation, mediation, ...)
- CaseCategory: Case classification that selects the catalog rules
- RecordStatus: Lifecycle of one logged unit of work
- ServiceRecord: One logged unit of work on a case, owned by the caller

Records are immutable once created. A record whose service type is not a
known ServiceType is still constructible; the engine reports it as malformed
instead of rejecting the whole snapshot.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union
from uuid import uuid4

from pydantic import Field, field_validator

from la_core_lib.models.common import EngineModel, ensure_utc, parse_utc_timestamp


def _normalize_token(value: str) -> str:
    return value.strip().upper().replace("-", "_").replace(" ", "_")


class ServiceType(str, Enum):
    """Unit of legal work. Extensible only by updating the service catalog."""

    CONSULTATION = "CONSULTATION"
    DOCUMENT_PREPARATION = "DOCUMENT_PREPARATION"
    COURT_APPEARANCE = "COURT_APPEARANCE"
    RESEARCH = "RESEARCH"
    COMMUNITY_OUTREACH = "COMMUNITY_OUTREACH"
    MEDIATION = "MEDIATION"
    CLIENT_MEETING = "CLIENT_MEETING"
    CASE_REVIEW = "CASE_REVIEW"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            token = _normalize_token(value)
            for member in cls:
                if member.value == token:
                    return member
        return None

    @classmethod
    def parse(cls, value: object) -> Optional["ServiceType"]:
        """Return the matching ServiceType, or None when unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'Document Preparation'"""
        return self.value.replace("_", " ").title()


class CaseCategory(str, Enum):
    """Case classification. Determines which services are required vs optional."""

    FAMILY = "FAMILY"
    CRIMINAL = "CRIMINAL"
    CIVIL = "CIVIL"
    PROPERTY = "PROPERTY"
    LABOR = "LABOR"
    COMMERCIAL = "COMMERCIAL"
    ADMINISTRATIVE = "ADMINISTRATIVE"
    CONSTITUTIONAL = "CONSTITUTIONAL"
    OTHER = "OTHER"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            token = _normalize_token(value)
            for member in cls:
                if member.value == token:
                    return member
        return None


class RecordStatus(str, Enum):
    """
    Status of a service record.

    Only COMPLETED records count toward progress. IN_PROGRESS records still
    appear on the timeline. CANCELLED records are ignored everywhere.
    """

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            token = _normalize_token(value).lower()
            if token == "canceled":
                return cls.CANCELLED
            if token == "active":
                return cls.IN_PROGRESS
            for member in cls:
                if member.value == token:
                    return member
        return None


class ServiceRecord(EngineModel):
    """
    One unit of completed or in-progress work on a case.

    Owned by whichever caller logged the work; the engine never mutates it.
    """

    id: str = Field(
        default_factory=lambda: f"rec_{uuid4().hex[:12]}",
        description="Record identifier, referenced by other records' depends_on"
    )

    service_type: Union[ServiceType, str] = Field(
        union_mode="left_to_right",
        description="Service type; an unrecognized value is kept verbatim and reported as malformed"
    )

    status: RecordStatus = Field(
        description="in_progress | completed | cancelled"
    )

    start_time: datetime = Field(
        description="When work started (UTC)"
    )

    end_time: Optional[datetime] = Field(
        default=None,
        description="When work ended (UTC); None while in progress"
    )

    depends_on: Optional[List[str]] = Field(
        default=None,
        description="Ids of records this one logically follows. None = not stated, [] = no dependencies"
    )

    title: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Short title for timeline display"
    )

    description: Optional[str] = Field(
        default=None,
        description="Free-text description of the work"
    )

    @field_validator('service_type', mode='before')
    @classmethod
    def coerce_service_type(cls, v):
        """Map known spellings onto ServiceType; keep anything else as a raw string"""
        if isinstance(v, str):
            return ServiceType.parse(v) or v.strip()
        return v

    @field_validator('status', mode='before')
    @classmethod
    def coerce_status(cls, v):
        if isinstance(v, str):
            return RecordStatus(v)
        return v

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def parse_timestamps(cls, v):
        if isinstance(v, str):
            return parse_utc_timestamp(v)
        return v

    @field_validator('start_time', 'end_time')
    @classmethod
    def normalize_to_utc(cls, v):
        return ensure_utc(v) if v is not None else v

    @property
    def is_recognized(self) -> bool:
        """Check if the service type is a known ServiceType"""
        return isinstance(self.service_type, ServiceType)

    @property
    def has_valid_window(self) -> bool:
        """Check that end_time, when present, is not earlier than start_time"""
        return self.end_time is None or self.end_time >= self.start_time

    @property
    def raw_service_type(self) -> str:
        """Service type as a plain string, recognized or not"""
        if isinstance(self.service_type, ServiceType):
            return self.service_type.value
        return str(self.service_type)

    @property
    def effective_date(self) -> datetime:
        """Timeline date: end_time if present, else start_time"""
        return self.end_time or self.start_time

    @property
    def duration_seconds(self) -> Optional[int]:
        """Elapsed whole seconds between start and end, None while open"""
        if self.end_time is None:
            return None
        return int((self.end_time - self.start_time).total_seconds())
