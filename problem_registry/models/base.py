"""
Base Pydantic models with common configurations.

Provides a base model that serializes all datetime fields as ISO-8601 UTC
strings with millisecond precision and a 'Z' suffix, the format clients
of the problem registry expect.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, PlainSerializer


def serialize_datetime_utc(dt: Optional[datetime]) -> Optional[str]:
    """
    Serialize datetime to ISO format in UTC with millisecond precision.

    If the datetime is naive (no timezone), assumes it's UTC.
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


# Type alias for datetime fields that should be serialized with UTC timezone
UTCDatetime = Annotated[datetime, PlainSerializer(serialize_datetime_utc, return_type=str)]


class APIBaseModel(BaseModel):
    """
    Base model for API payloads.

    Fields are declared in snake_case and exposed on the wire in camelCase
    through aliases; both spellings are accepted on input.
    """

    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }
