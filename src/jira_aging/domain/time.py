from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Instant(BaseModel):
    """Represents a timezone-aware point in time that keeps its own zone.

    Naive datetimes are taken to be UTC. Aware datetimes are left in the zone
    they carry, since the civil date of an event depends on it.
    """

    value: datetime = Field(alias="at")
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @model_validator(mode="after")
    def _ensure_timezone(self) -> "Instant":
        moment = self.value
        if moment.tzinfo is None or moment.utcoffset() is None:
            object.__setattr__(self, "value", moment.replace(tzinfo=timezone.utc))
        return self

    @classmethod
    def now(cls, tz: Optional[tzinfo] = None) -> "Instant":
        if tz is None:
            return cls(at=datetime.now().astimezone())
        return cls(at=datetime.now(tz))

    def to_datetime(self) -> datetime:
        return self.value
