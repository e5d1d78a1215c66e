"""Domain data models for issue snapshots, comments, and continuity results."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()


# -----------------------------------------------------------------------------
# Inputs
# -----------------------------------------------------------------------------
@dataclass(slots=True)
class RichText:
    """Description or comment body: plain text or an Atlassian document (ADF)."""

    kind: Literal["text", "doc"]
    value: Any

    @classmethod
    def from_raw(cls, value: Any) -> RichText | None:
        if value is None:
            return None
        if isinstance(value, dict):
            return cls("doc", value)
        return cls("text", str(value))

    def plain_text(self) -> str:
        if self.kind == "text":
            return str(self.value or "")
        return flatten_adf(self.value)


def flatten_adf(node: Any) -> str:
    """Collapse an ADF node tree into searchable plain text."""
    if not isinstance(node, dict):
        return ""
    if node.get("type") == "text" and node.get("text"):
        return str(node["text"])
    content = node.get("content")
    if not isinstance(content, list):
        return ""
    separator = "\n" if node.get("type") == "doc" else " "
    parts = [flatten_adf(child) for child in content]
    return separator.join(p for p in parts if p)


@dataclass(slots=True, frozen=True)
class ChangeEvent:
    timestamp: datetime
    field: str
    from_value: str | None
    to_value: str | None


@dataclass(slots=True)
class ChangeItem:
    field: str
    from_value: str | None = None
    to_value: str | None = None


@dataclass(slots=True)
class HistoryEntry:
    created: datetime
    items: list[ChangeItem] = field(default_factory=list)
    author: str | None = None

    def touches(self, field_name: str) -> bool:
        return any(item.field == field_name for item in self.items)

    def item_for(self, field_name: str) -> ChangeItem | None:
        for item in self.items:
            if item.field == field_name:
                return item
        return None

    def events(self) -> Iterator[ChangeEvent]:
        for item in self.items:
            yield ChangeEvent(self.created, item.field, item.from_value, item.to_value)


@dataclass(slots=True)
class IssueSnapshot:
    key: str
    created: datetime
    resolution_date: datetime | None = None
    status: str | None = None
    assignee: str | None = None
    summary: str | None = None
    description: RichText | None = None
    priority: str | None = None
    labels: list[str] = field(default_factory=list)
    histories: list[HistoryEntry] = field(default_factory=list)

    def current_value(self, field_name: str) -> str | None:
        if field_name == "status":
            return self.status
        if field_name == "assignee":
            return self.assignee
        if field_name == "summary":
            return self.summary
        if field_name == "priority":
            return self.priority
        if field_name == "labels":
            return " ".join(self.labels) if self.labels else None
        return None


@dataclass(slots=True)
class CommentModel:
    author: str | None
    created: datetime
    body_text: str = ""


# -----------------------------------------------------------------------------
# Results
# -----------------------------------------------------------------------------
@dataclass(slots=True)
class ActiveWorkPeriod:
    start: datetime
    end: datetime
    duration_hours: float
    status: str | None
    assignee: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": _iso(self.start),
            "endDate": _iso(self.end),
            "durationHours": self.duration_hours,
            "status": self.status,
            "assignee": self.assignee,
        }


@dataclass(slots=True)
class StagnationPeriod:
    start: datetime
    end: datetime
    duration_days: int
    status: str
    assignee: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": _iso(self.start),
            "endDate": _iso(self.end),
            "durationDays": self.duration_days,
            "status": self.status,
            "assignee": self.assignee,
        }


@dataclass(slots=True)
class CommunicationGap:
    start: datetime
    end: datetime
    duration_days: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "startDate": _iso(self.start),
            "endDate": _iso(self.end),
            "durationDays": self.duration_days,
        }


@dataclass(slots=True)
class AssigneeChange:
    date: datetime
    from_assignee: str | None
    to_assignee: str | None
    status: str | None


@dataclass(slots=True)
class ContextSwitchEvent:
    date: datetime
    from_assignee: str | None
    to_assignee: str | None
    status: str | None
    days_from_start: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": _iso(self.date),
            "fromAssignee": self.from_assignee,
            "toAssignee": self.to_assignee,
            "status": self.status,
            "daysFromStart": self.days_from_start,
        }


@dataclass(slots=True)
class ContextSwitchAnalysis:
    count: int
    timing: list[ContextSwitchEvent] = field(default_factory=list)
    impact: str = "None"

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "timing": [event.to_dict() for event in self.timing],
            "impact": self.impact,
        }


@dataclass(slots=True)
class WorkFragmentation:
    fragmentation_score: int
    periods: list[ActiveWorkPeriod] = field(default_factory=list)

    @property
    def active_work_periods(self) -> int:
        return len(self.periods)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fragmentationScore": self.fragmentation_score,
            "activeWorkPeriods": self.active_work_periods,
            "periods": [period.to_dict() for period in self.periods],
        }


@dataclass(slots=True)
class LateStageChange:
    date: datetime
    field: str
    description: str
    percent_complete: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": _iso(self.date),
            "field": self.field,
            "description": self.description,
            "percentComplete": self.percent_complete,
        }


@dataclass(slots=True)
class QuestionResponsePair:
    question_at: datetime
    response_at: datetime
    response_time_hours: float


@dataclass(slots=True)
class ContinuityAnalysisResult:
    flow_efficiency: float
    stagnation_periods: list[StagnationPeriod]
    longest_stagnation_period: int
    communication_gaps: list[CommunicationGap]
    context_switches: ContextSwitchAnalysis
    momentum_score: int
    work_fragmentation: WorkFragmentation
    late_stage_changes: list[LateStageChange]
    feedback_response_time: float

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form with camelCase keys and ISO-8601 timestamps."""
        return {
            "flowEfficiency": self.flow_efficiency,
            "stagnationPeriods": [p.to_dict() for p in self.stagnation_periods],
            "longestStagnationPeriod": self.longest_stagnation_period,
            "communicationGaps": [g.to_dict() for g in self.communication_gaps],
            "contextSwitches": self.context_switches.to_dict(),
            "momentumScore": self.momentum_score,
            "workFragmentation": self.work_fragmentation.to_dict(),
            "lateStageChanges": [c.to_dict() for c in self.late_stage_changes],
            "feedbackResponseTime": self.feedback_response_time,
        }
