"""Assignee hand-offs (context switches) and their likely effect on velocity."""

from __future__ import annotations

from datetime import datetime

from jira_continuity.core.calendar import business_days_between, ensure_utc, issue_end_date
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import AssigneeChange, ContextSwitchAnalysis, ContextSwitchEvent, IssueSnapshot
from jira_continuity.core.status import is_active_development
from jira_continuity.core.timeline import IssueTimeline, sorted_histories

IMPACT_NONE = "None"
IMPACT_MINIMAL = "Minimal - single assignee throughout"
IMPACT_SIGNIFICANT = "Significant - late stage assignee changes"
IMPACT_HIGH = "High - multiple assignees with frequent changes"
IMPACT_MODERATE = "Moderate - assignee changes during active development"
IMPACT_LOW = "Low - assignee changes at logical handoff points"


def extract_assignee_changes(issue: IssueSnapshot, timeline: IssueTimeline | None = None) -> list[AssigneeChange]:
    """One record per change-log entry touching ``assignee``, in time order."""
    timeline = timeline or IssueTimeline(issue)
    changes: list[AssigneeChange] = []
    for entry in sorted_histories(issue):
        item = entry.item_for("assignee")
        if item is None:
            continue
        changes.append(
            AssigneeChange(
                date=entry.created,
                from_assignee=item.from_value or None,
                to_assignee=item.to_value or None,
                status=timeline.status_at(entry.created),
            )
        )
    return changes


def identify_late_stage_switches(
    issue: IssueSnapshot,
    changes: list[AssigneeChange],
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> list[AssigneeChange]:
    """Changes at or after ``late_switch_threshold`` of the elapsed lifetime."""
    created = ensure_utc(issue.created)
    end = ensure_utc(issue_end_date(issue, now))
    threshold = created + (end - created) * config.late_switch_threshold
    return [c for c in changes if ensure_utc(c.date) >= threshold]


def assess_velocity_impact(
    issue: IssueSnapshot,
    changes: list[AssigneeChange],
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> str:
    """Classify hand-offs; the first matching rule wins."""
    if not changes:
        return IMPACT_NONE
    if len(changes) <= 1:
        return IMPACT_MINIMAL
    if identify_late_stage_switches(issue, changes, now, config):
        return IMPACT_SIGNIFICANT
    unique_assignees = {c.to_assignee for c in changes if c.to_assignee is not None}
    if len(unique_assignees) > 2 and len(changes) > 3:
        return IMPACT_HIGH
    if any(is_active_development(c.status, config) for c in changes):
        return IMPACT_MODERATE
    return IMPACT_LOW


def analyze_context_switches(
    issue: IssueSnapshot,
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
    timeline: IssueTimeline | None = None,
) -> ContextSwitchAnalysis:
    changes = extract_assignee_changes(issue, timeline)
    if not changes:
        return ContextSwitchAnalysis(count=0, timing=[], impact=IMPACT_NONE)
    timing = [
        ContextSwitchEvent(
            date=c.date,
            from_assignee=c.from_assignee,
            to_assignee=c.to_assignee,
            status=c.status,
            days_from_start=business_days_between(issue.created, c.date, config.calendar_timezone),
        )
        for c in changes
    ]
    return ContextSwitchAnalysis(
        count=len(changes),
        timing=timing,
        impact=assess_velocity_impact(issue, changes, now, config),
    )
