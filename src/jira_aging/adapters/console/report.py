from __future__ import annotations

from typing import List, TextIO

from jira_aging.domain.models import AgingReport, StatusAge


TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M %z"


def format_age(age: StatusAge) -> str:
    return f"{age.key} ({age.business_days} days old since {age.changed_at.strftime(TIMESTAMP_FORMAT)})"


def render_report(report: AgingReport) -> str:
    """Render the report as one bracketed block per status."""
    lines: List[str] = []
    for status, ages in report.groups:
        lines.append(f"{status}: [")
        lines.extend(f"  {format_age(age)}" for age in ages)
        lines.append("]")
    return "\n".join(lines) + "\n" if lines else ""


def write_report(report: AgingReport, stream: TextIO) -> None:
    stream.write(render_report(report))
    stream.flush()
