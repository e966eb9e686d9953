"""
Membership durations and the calendar arithmetic behind expiry dates.

``offset(code)`` is the single mapping from a duration code to a calendar delta;
every place that computes a membership end date goes through ``end_date``.
Month-based offsets keep the day of month where the target month has it and
clamp to the month's last day otherwise, so 2024-01-31 + 1 month is 2024-02-29.
"""
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Union

from django.db import models
from django.utils import timezone

from core.errors import InvalidDuration, MissingDuration

DateLike = Union[date, datetime]


class DurationCode(models.TextChoices):
    ONE_WEEK = "1 week", "1 week"
    ONE_MONTH = "1 month", "1 month"
    THREE_MONTHS = "3 months", "3 months"
    SIX_MONTHS = "6 months", "6 months"
    ONE_YEAR = "1 year", "1 year"


@dataclass(frozen=True)
class CalendarDelta:
    months: int = 0
    days: int = 0

    def apply(self, start: DateLike) -> DateLike:
        result = add_months(start, self.months) if self.months else start
        return result + timedelta(days=self.days)


_OFFSETS = {
    DurationCode.ONE_WEEK: CalendarDelta(days=7),
    DurationCode.ONE_MONTH: CalendarDelta(months=1),
    DurationCode.THREE_MONTHS: CalendarDelta(months=3),
    DurationCode.SIX_MONTHS: CalendarDelta(months=6),
    DurationCode.ONE_YEAR: CalendarDelta(months=12),
}


@dataclass(frozen=True)
class Membership:
    duration: str
    start_date: datetime
    end_date: datetime


def add_months(value: DateLike, months: int) -> DateLike:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    _, last_day = monthrange(year, month)
    return value.replace(year=year, month=month, day=min(value.day, last_day))


def parse_duration(value: Optional[str], required: bool = True) -> Optional[DurationCode]:
    if value is None or value == "":
        if required:
            raise MissingDuration()
        return None
    try:
        return DurationCode(value)
    except ValueError:
        raise InvalidDuration()


def offset(code) -> CalendarDelta:
    return _OFFSETS[parse_duration(code)]


def end_date(start: DateLike, code) -> DateLike:
    return offset(code).apply(start)


def compute_membership(code, start: Optional[datetime] = None) -> Membership:
    start = start or timezone.now()
    code = parse_duration(code)
    return Membership(duration=code.value, start_date=start, end_date=end_date(start, code))
