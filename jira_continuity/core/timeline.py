"""Reconstruct historical field values from an issue's change log."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from datetime import datetime

from .calendar import ensure_utc
from .models import ChangeEvent, HistoryEntry, IssueSnapshot


def sorted_histories(issue: IssueSnapshot) -> list[HistoryEntry]:
    """Change-log entries in ascending time order (stable for equal timestamps)."""
    return sorted(issue.histories, key=lambda h: ensure_utc(h.created))


def change_events(issue: IssueSnapshot, field: str | None = None) -> list[ChangeEvent]:
    """Flattened change log (optionally one field), stable-sorted by timestamp."""
    events = [
        event for entry in issue.histories for event in entry.events() if field is None or event.field == field
    ]
    return sorted(events, key=lambda e: ensure_utc(e.timestamp))


class FieldTimeline:
    """Index of every change to one field, answering "value at T" in O(log n).

    Entries sharing a timestamp keep their source order, so the later one wins.
    """

    __slots__ = ("field", "_times", "_values", "_current")

    def __init__(self, issue: IssueSnapshot, field: str):
        self.field = field
        self._times: list[datetime] = []
        self._values: list[str | None] = []
        for event in change_events(issue, field):
            self._times.append(ensure_utc(event.timestamp))
            self._values.append(event.to_value)
        self._current = issue.current_value(field)

    def __len__(self) -> int:
        return len(self._times)

    def value_at(self, timestamp: datetime) -> str | None:
        idx = bisect.bisect_right(self._times, ensure_utc(timestamp)) - 1
        if idx < 0:
            return self._current
        return self._values[idx]


class IssueTimeline:
    """Status and assignee timelines for one snapshot, built once per analysis."""

    def __init__(self, issue: IssueSnapshot):
        self.issue = issue
        self.status = FieldTimeline(issue, "status")
        self.assignee = FieldTimeline(issue, "assignee")

    def status_at(self, timestamp: datetime) -> str | None:
        return self.status.value_at(timestamp)

    def assignee_at(self, timestamp: datetime) -> str | None:
        return self.assignee.value_at(timestamp)


def value_of_field_at(issue: IssueSnapshot, field: str, timestamp: datetime) -> str | None:
    """Value of ``field`` at ``timestamp``: latest change at or before it, else current."""
    return FieldTimeline(issue, field).value_at(timestamp)


@dataclass(slots=True, frozen=True)
class StatusChange:
    date: datetime
    from_status: str | None
    to_status: str | None
    assignee: str | None


def extract_status_changes(issue: IssueSnapshot, timeline: IssueTimeline | None = None) -> list[StatusChange]:
    """Chronological status transitions, each tagged with the assignee at that moment."""
    timeline = timeline or IssueTimeline(issue)
    changes: list[StatusChange] = []
    for event in change_events(issue, "status"):
        changes.append(
            StatusChange(
                date=event.timestamp,
                from_status=event.from_value,
                to_status=event.to_value,
                assignee=timeline.assignee_at(event.timestamp),
            )
        )
    return changes
