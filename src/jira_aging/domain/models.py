from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jira_aging.domain.calendar import CivilDate

# Jira renders offsets without a colon, e.g. 2017-12-15T11:02:01.443-0500.
JIRA_TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)


def parse_jira_timestamp(raw: str) -> datetime:
    """Parse a Jira changelog timestamp, keeping the offset it was written with."""
    text = raw.strip().strip('"')
    for fmt in JIRA_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Unrecognised Jira timestamp: {raw!r}")


class JiraModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class User(JiraModel):
    name: str = ""
    email_address: str = Field(default="", alias="emailAddress")
    display_name: str = Field(default="", alias="displayName")
    time_zone: str = Field(default="", alias="timeZone")

    def label(self) -> str:
        return self.display_name or self.name or self.email_address


class HistoryItem(JiraModel):
    field: str = ""
    from_value: Optional[str] = Field(default=None, alias="from")
    from_string: Optional[str] = Field(default=None, alias="fromString")
    to_value: Optional[str] = Field(default=None, alias="to")
    to_string: Optional[str] = Field(default=None, alias="toString")


class History(JiraModel):
    id: str = ""
    author: User = Field(default_factory=User)
    created: datetime
    items: List[HistoryItem] = Field(default_factory=list)

    @field_validator("created", mode="before")
    @classmethod
    def _parse_created(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_jira_timestamp(value)
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Changelog(JiraModel):
    start_at: int = Field(default=0, alias="startAt")
    max_results: int = Field(default=0, alias="maxResults")
    total: int = 0
    histories: List[History] = Field(default_factory=list)


class StatusChange(BaseModel):
    """The most recent workflow transition of an issue."""

    status: str
    changed_at: datetime
    changed_by: User


class Issue(JiraModel):
    id: str = ""
    key: str
    changelog: Changelog = Field(default_factory=Changelog)

    def latest_status_change(self) -> Optional[StatusChange]:
        latest: Optional[StatusChange] = None
        for history in self.changelog.histories:
            for item in history.items:
                if item.field != "status":
                    continue
                latest = StatusChange(
                    status=item.to_string or "",
                    changed_at=history.created,
                    changed_by=history.author,
                )
        return latest


class IssuePage(JiraModel):
    start_at: int = Field(default=0, alias="startAt")
    max_results: int = Field(default=0, alias="maxResults")
    total: int = 0
    issues: List[Issue] = Field(default_factory=list)


class StatusAge(BaseModel):
    """How long an issue has been sitting in its current status."""

    key: str
    status: str
    changed_at: datetime
    changed_by: User
    business_days: int


class AgingReport(BaseModel):
    """Issues grouped by status, each group ordered from youngest to oldest."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    as_of: CivilDate
    groups: List[Tuple[str, List[StatusAge]]] = Field(default_factory=list)

    def group(self, status: str) -> List[StatusAge]:
        for name, ages in self.groups:
            if name == status:
                return ages
        return []

    def statuses(self) -> List[str]:
        return [name for name, _ in self.groups]
