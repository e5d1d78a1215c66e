"""Stagnation periods and communication gaps.

Both detectors collect timestamped touchpoints, sort them, and report every
consecutive pair separated by at least ``threshold`` business days.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import NamedTuple

from jira_continuity.core.calendar import business_days_between, ensure_utc
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import CommentModel, CommunicationGap, IssueSnapshot, StagnationPeriod
from jira_continuity.core.status import clean_status_name
from jira_continuity.core.timeline import IssueTimeline


class TouchEvent(NamedTuple):
    timestamp: datetime
    status: str | None = None
    assignee: str | None = None


class Gap(NamedTuple):
    start: TouchEvent
    end: TouchEvent
    business_days: int


def find_gaps(events: Iterable[TouchEvent], threshold: int, tz: str = DEFAULT_CONFIG.calendar_timezone) -> list[Gap]:
    """Consecutive event pairs at least ``threshold`` business days apart."""
    ordered = sorted(events, key=lambda e: ensure_utc(e.timestamp))
    if len(ordered) < 2:
        return []
    gaps: list[Gap] = []
    for prev, nxt in zip(ordered, ordered[1:]):
        days = business_days_between(prev.timestamp, nxt.timestamp, tz)
        if days >= threshold:
            gaps.append(Gap(prev, nxt, days))
    return gaps


def collect_update_events(
    issue: IssueSnapshot,
    timeline: IssueTimeline | None = None,
) -> list[TouchEvent]:
    """Creation, every change-log entry, and resolution, with status/assignee at each."""
    timeline = timeline or IssueTimeline(issue)
    stamps = [issue.created]
    stamps.extend(entry.created for entry in issue.histories)
    if issue.resolution_date is not None:
        stamps.append(issue.resolution_date)
    return [TouchEvent(ts, timeline.status_at(ts), timeline.assignee_at(ts)) for ts in stamps]


def collect_communication_events(
    issue: IssueSnapshot,
    comments: Iterable[CommentModel],
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> list[TouchEvent]:
    """Creation, comments, resolution, and edits to communication fields."""
    events = [TouchEvent(issue.created)]
    events.extend(TouchEvent(c.created) for c in comments)
    if issue.resolution_date is not None:
        events.append(TouchEvent(issue.resolution_date))
    for entry in issue.histories:
        if any(entry.touches(name) for name in config.communication_fields):
            events.append(TouchEvent(entry.created))
    return events


def identify_stagnation_periods(
    issue: IssueSnapshot,
    config: ContinuityConfig = DEFAULT_CONFIG,
    *,
    threshold: int | None = None,
    timeline: IssueTimeline | None = None,
) -> list[StagnationPeriod]:
    threshold = config.stagnation_threshold_days if threshold is None else threshold
    events = collect_update_events(issue, timeline)
    return [
        StagnationPeriod(
            start=gap.start.timestamp,
            end=gap.end.timestamp,
            duration_days=gap.business_days,
            status=clean_status_name(gap.start.status),
            assignee=gap.start.assignee,
        )
        for gap in find_gaps(events, threshold, config.calendar_timezone)
    ]


def identify_communication_gaps(
    issue: IssueSnapshot,
    comments: Iterable[CommentModel],
    config: ContinuityConfig = DEFAULT_CONFIG,
    *,
    threshold: int | None = None,
) -> list[CommunicationGap]:
    threshold = config.communication_gap_threshold_days if threshold is None else threshold
    events = collect_communication_events(issue, comments, config)
    return [
        CommunicationGap(start=gap.start.timestamp, end=gap.end.timestamp, duration_days=gap.business_days)
        for gap in find_gaps(events, threshold, config.calendar_timezone)
    ]
