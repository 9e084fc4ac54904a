from __future__ import annotations

import logging
from typing import Dict, List, Optional

from jira_aging.application.commands import BuildReportCommand
from jira_aging.domain.calendar import business_days_until, normalize
from jira_aging.domain.models import AgingReport, Issue, StatusAge
from jira_aging.domain.time import Instant
from jira_aging.ports.issues import IssuePagePort


class AgingReportService:
    """Application service building the status aging report for a board."""

    def __init__(self, issue_port: IssuePagePort) -> None:
        self.issue_port = issue_port
        self.logger = logging.getLogger(__name__)

    def collect_issues(self, board_id: int) -> List[Issue]:
        issues: List[Issue] = []
        start_at = 0
        total = 1

        while start_at < total:
            page = self.issue_port.fetch_page(board_id, start_at)
            issues.extend(page.issues)
            total = page.total
            if not page.issues and page.start_at < total:
                self.logger.warning(
                    f"Board {board_id} returned an empty page at startAt={page.start_at} "
                    f"of total={total}; stopping pagination"
                )
                break
            start_at = page.start_at + len(page.issues)

        self.logger.info(f"Collected {len(issues)} issues from board {board_id}")
        return issues

    def age_issues(
        self, issues: List[Issue], command: BuildReportCommand, now: Optional[Instant] = None
    ) -> AgingReport:
        today = normalize(now or Instant.now())
        ignored = set(command.ignored_statuses)

        by_status: Dict[str, List[StatusAge]] = {}
        for issue in issues:
            change = issue.latest_status_change()
            if change is None or not change.status:
                continue
            if change.status in ignored:
                continue

            age = StatusAge(
                key=issue.key,
                status=change.status,
                changed_at=change.changed_at,
                changed_by=change.changed_by,
                business_days=business_days_until(normalize(change.changed_at), today),
            )
            by_status.setdefault(change.status, []).append(age)

        groups = [
            (status, sorted(by_status.get(status, []), key=lambda age: age.business_days))
            for status in command.statuses
        ]
        skipped = sorted(set(by_status) - set(command.statuses))
        if skipped:
            self.logger.debug(f"Statuses not included in report: {', '.join(skipped)}")
        return AgingReport(as_of=today, groups=groups)

    def build_report(self, command: BuildReportCommand, now: Optional[Instant] = None) -> AgingReport:
        issues = self.collect_issues(command.board_id)
        return self.age_issues(issues, command, now=now)
