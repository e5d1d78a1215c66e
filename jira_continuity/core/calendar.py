"""Business-day calendar helpers.

Two duration units are used across the metrics and they are never mixed:

- business days (weekdays between two calendar dates, inclusive) for gap and
  stagnation thresholds;
- raw elapsed hours for flow efficiency and fragmentation.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytz

from .config import BUSINESS_DAY_END_HOUR, BUSINESS_DAY_START_HOUR, CALENDAR_TIMEZONE
from .models import IssueSnapshot


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value.astimezone(pytz.UTC)


def local_date(value: datetime, tz: str = CALENDAR_TIMEZONE) -> date:
    return ensure_utc(value).astimezone(pytz.timezone(tz)).date()


def _weekdays_until(day: date) -> int:
    # Weekdays in [epoch Monday, day)
    days = (day - date(1970, 1, 5)).days
    full_weeks, remainder = divmod(days, 7)
    return full_weeks * 5 + min(remainder, 5)


def business_days_between(start: datetime, end: datetime, tz: str = CALENDAR_TIMEZONE) -> int:
    """Count Mon-Fri calendar days in ``[start, end]`` (inclusive, day granularity).

    Parameters
    ----------
    start, end : datetime
        Instants; naive values are treated as UTC.
    tz : str
        Timezone whose calendar days are counted.

    Returns
    -------
    int
        Weekday count, or 0 when ``start`` is after ``end``.

    Examples
    --------
    A Sunday morning to the following Thursday covers Mon-Thu:

    >>> from datetime import datetime, timezone
    >>> business_days_between(datetime(2023, 1, 1, 10, tzinfo=timezone.utc),
    ...                       datetime(2023, 1, 5, tzinfo=timezone.utc))
    4
    """
    if ensure_utc(start) > ensure_utc(end):
        return 0
    first = local_date(start, tz)
    last = local_date(end, tz)
    if first > last:
        return 0
    return _weekdays_until(last + timedelta(days=1)) - _weekdays_until(first)


def hours_between(start: datetime, end: datetime) -> float:
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / 3600


def business_hours_between(
    start: datetime,
    end: datetime,
    tz: str = CALENDAR_TIMEZONE,
    start_hour: int = BUSINESS_DAY_START_HOUR,
    end_hour: int = BUSINESS_DAY_END_HOUR,
) -> float:
    """Elapsed hours overlapping weekday working windows (``start_hour``-``end_hour``)."""
    start_utc = ensure_utc(start)
    end_utc = ensure_utc(end)
    if end_utc <= start_utc:
        return 0.0
    zone = pytz.timezone(tz)
    day = local_date(start_utc, tz)
    last = local_date(end_utc, tz)
    total = 0.0
    while day <= last:
        if day.weekday() < 5:
            window_start = zone.localize(datetime.combine(day, time(start_hour)))
            window_end = zone.localize(datetime.combine(day, time(end_hour)))
            overlap_start = max(window_start, start_utc)
            overlap_end = min(window_end, end_utc)
            if overlap_end > overlap_start:
                total += (overlap_end - overlap_start).total_seconds() / 3600
        day += timedelta(days=1)
    return total


def issue_end_date(issue: IssueSnapshot, now: datetime) -> datetime:
    """Resolution date when resolved, otherwise ``now``."""
    if issue.resolution_date is not None:
        return issue.resolution_date
    return now
