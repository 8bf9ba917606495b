"""
Timezone-aware timestamp helpers shared by the table models
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import DateTime
from sqlmodel import Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to UTC; naive values (SQLite drops the offset) are taken as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def timestamp_field(**kwargs: Any) -> Any:
    """Field stored as TIMESTAMP WITH TIME ZONE"""
    return Field(sa_type=DateTime(timezone=True), **kwargs)
