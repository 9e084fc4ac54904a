from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

DEFAULT_BOARD_ID = 2924

DEFAULT_REPORT_STATUSES = [
    "In Progress",  # in development
    "In Progress - 1",  # pull request
    "In Progress - 2",  # ready for QA
    "In Testing",
]

DEFAULT_IGNORED_STATUSES = ["Open", "Reopened", "Closed"]


class BuildReportCommand(BaseModel):
    board_id: int = Field(DEFAULT_BOARD_ID, description="Jira agile board identifier")
    statuses: List[str] = Field(default_factory=lambda: list(DEFAULT_REPORT_STATUSES))
    ignored_statuses: List[str] = Field(default_factory=lambda: list(DEFAULT_IGNORED_STATUSES))
