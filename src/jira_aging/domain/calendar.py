"""Civil dates and business-day arithmetic.

A :class:`CivilDate` is a calendar date pinned to 06:00 local time in the zone
of the timestamp it came from. Pinning to 06:00 keeps every value clear of
daylight-saving transitions, which happen at midnight or between 02:00 and
03:00 in the zones that observe them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Union

from jira_aging.domain.time import Instant

NOMINAL_HOUR = 6

# One civil day is always reached within 25 absolute hours, even across a
# daylight-saving shift of up to one hour.
DAY_STEP = timedelta(hours=25)

SATURDAY = 5
SUNDAY = 6


@dataclass(frozen=True)
class CivilDate:
    """A calendar date anchored at 06:00 in its source timezone."""

    moment: datetime

    def __post_init__(self) -> None:
        moment = self.moment
        if moment.tzinfo is None or moment.utcoffset() is None:
            raise ValueError("CivilDate requires a timezone-aware datetime")
        if (moment.hour, moment.minute, moment.second, moment.microsecond) != (NOMINAL_HOUR, 0, 0, 0):
            raise ValueError(
                f"CivilDate must be anchored at {NOMINAL_HOUR:02d}:00, got {moment.isoformat()}; use normalize()"
            )

    def date(self) -> date:
        return self.moment.date()

    def weekday(self) -> int:
        return self.moment.weekday()

    def utcoffset(self) -> timedelta:
        return self.moment.utcoffset()

    def next(self) -> "CivilDate":
        return next_civil_date(self)

    def business_days_until(self, until: "CivilDate") -> int:
        return business_days_until(self, until)

    def isoformat(self) -> str:
        return self.moment.isoformat()

    def __str__(self) -> str:
        return self.date().isoformat()


Moment = Union[datetime, Instant, CivilDate]


def _as_aware_datetime(moment: Moment) -> datetime:
    if isinstance(moment, CivilDate):
        return moment.moment
    if isinstance(moment, Instant):
        return moment.to_datetime()
    if moment.tzinfo is None or moment.utcoffset() is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _shift(moment: datetime, delta: timedelta) -> datetime:
    # Aware arithmetic in Python is wall-clock; go through UTC to move on the absolute timeline.
    return (moment.astimezone(timezone.utc) + delta).astimezone(moment.tzinfo)


def _before(left: datetime, right: datetime) -> bool:
    return left.astimezone(timezone.utc) < right.astimezone(timezone.utc)


def normalize(moment: Moment) -> CivilDate:
    """Truncate ``moment`` to its local calendar date and pin it at 06:00 in the same zone."""
    value = _as_aware_datetime(moment)
    return CivilDate(datetime(value.year, value.month, value.day, NOMINAL_HOUR, tzinfo=value.tzinfo))


def next_civil_date(civil_date: CivilDate) -> CivilDate:
    """Return the civil date one local calendar day after ``civil_date``."""
    return normalize(_shift(civil_date.moment, DAY_STEP))


def business_days_until(start: CivilDate, until: CivilDate) -> int:
    """Count the working-day steps needed to get from ``start`` to ``until``.

    ``until`` is first moved into ``start``'s zone and corrected by the
    difference of the two UTC offsets, so that two dates anchored in
    different zones compare as if they shared one. Each step advances the
    cursor by one civil day and counts once; a cursor landing on Saturday or
    Sunday is moved on to Monday before the next comparison.

    Returns 0 when ``until`` is not after ``start``. The result for a
    ``start`` that itself falls on a weekend follows the same steps but is
    not otherwise defined.
    """
    offset_delta = until.utcoffset() - start.utcoffset()
    aligned_until = _shift(until.moment.astimezone(start.moment.tzinfo), offset_delta)

    days = 0
    cursor = start
    while _before(cursor.moment, aligned_until):
        days += 1
        cursor = next_civil_date(cursor)

        if cursor.weekday() == SATURDAY:
            cursor = next_civil_date(cursor)
        if cursor.weekday() == SUNDAY:
            cursor = next_civil_date(cursor)

    return days
