"""Common model plumbing shared across the case progress engine.

This module contains:
- EngineModel: frozen Pydantic base with camelCase aliases for client payloads
- Timestamp helpers: ensure_utc(), parse_utc_timestamp()
- round_half_up(): percentage rounding used by progress and branch scoring
"""

import math
from datetime import datetime, timezone
from typing import Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class EngineModel(BaseModel):
    """Base for every engine model.

    Models are immutable once created. Fields are declared in snake_case and
    exposed in camelCase (``serviceType``, ``startTime``) so collaborators can
    feed stored records in and serialize results out without renaming.
    """

    class Config:
        frozen = True  # Immutable once created
        alias_generator = to_camel
        populate_by_name = True


def ensure_utc(value: datetime) -> datetime:
    """Return a timezone-aware datetime in UTC (naive values are assumed UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_utc_timestamp(timestamp: Union[str, datetime]) -> datetime:
    """Parse a UTC timestamp into a timezone-aware datetime object.

    Handles multiple ISO 8601 formats:
    - '2025-10-17T04:02:59+00:00' (timezone-aware with +00:00)
    - '2025-10-17T04:02:59Z' (Zulu time suffix)
    - '2025-10-17T04:02:59' (naive, assumed UTC)

    Args:
        timestamp: ISO timestamp string, or an existing datetime

    Returns:
        datetime: Timezone-aware datetime object in UTC
    """
    if isinstance(timestamp, datetime):
        return ensure_utc(timestamp)

    if timestamp.endswith('Z'):
        timestamp = timestamp[:-1]
    return ensure_utc(datetime.fromisoformat(timestamp))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up (12.5 -> 13)."""
    return int(math.floor(value + 0.5))
