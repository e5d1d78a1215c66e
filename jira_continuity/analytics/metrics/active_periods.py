"""Active work period detection.

Status changes are folded through a small state machine: entering an active
status opens a period, leaving it closes one. The fold step is pure and
returns the next state together with any period it completed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from jira_continuity.core.calendar import ensure_utc, hours_between, issue_end_date
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import ActiveWorkPeriod, IssueSnapshot
from jira_continuity.core.status import is_active_status
from jira_continuity.core.timeline import IssueTimeline, StatusChange, extract_status_changes

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ActivityState:
    current_date: datetime
    current_status: str | None
    current_assignee: str | None
    in_active_status: bool
    active_period_start: datetime | None


def create_active_period(
    start: datetime,
    end: datetime,
    status: str | None,
    assignee: str | None,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> ActiveWorkPeriod | None:
    """Build a period, or None when it is shorter than ``min_active_period_hours``."""
    duration = hours_between(start, end)
    if duration < config.min_active_period_hours:
        return None
    return ActiveWorkPeriod(start=start, end=end, duration_hours=duration, status=status, assignee=assignee)


def initial_state(issue: IssueSnapshot, config: ContinuityConfig = DEFAULT_CONFIG) -> ActivityState:
    """State at creation time, seeded from the snapshot's current status."""
    active = is_active_status(issue.status, config)
    return ActivityState(
        current_date=issue.created,
        current_status=issue.status,
        current_assignee=issue.assignee,
        in_active_status=active,
        active_period_start=issue.created if active else None,
    )


def process_status_change(
    state: ActivityState,
    change: StatusChange,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> tuple[ActivityState, ActiveWorkPeriod | None]:
    """Apply one status change; return the new state and any completed period."""
    to_active = is_active_status(change.to_status, config)
    in_active = state.in_active_status
    period_start = state.active_period_start
    completed: ActiveWorkPeriod | None = None

    if not state.in_active_status and to_active:
        in_active = True
        period_start = change.date
    elif state.in_active_status and state.active_period_start is not None and not to_active:
        completed = create_active_period(
            state.active_period_start,
            change.date,
            state.current_status,
            state.current_assignee,
            config,
        )
        in_active = False
        period_start = None

    new_state = replace(
        state,
        current_date=change.date,
        current_status=change.to_status if change.to_status is not None else state.current_status,
        current_assignee=change.assignee if change.assignee is not None else state.current_assignee,
        in_active_status=in_active,
        active_period_start=period_start,
    )
    return new_state, completed


def finalize_state(
    issue: IssueSnapshot,
    state: ActivityState,
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> ActiveWorkPeriod | None:
    """Close a period still open after the last change at resolution (or ``now``)."""
    if not state.in_active_status or state.active_period_start is None:
        return None
    end = issue_end_date(issue, now)
    if ensure_utc(end) < ensure_utc(state.active_period_start):
        return None
    return create_active_period(state.active_period_start, end, state.current_status, state.current_assignee, config)


def find_active_periods(
    issue: IssueSnapshot,
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
    timeline: IssueTimeline | None = None,
) -> list[ActiveWorkPeriod]:
    """Chronological, non-overlapping active work periods for ``issue``."""
    if not issue.histories:
        if not is_active_status(issue.status, config):
            return []
        period = create_active_period(
            issue.created, issue_end_date(issue, now), issue.status, issue.assignee, config
        )
        return [period] if period is not None else []

    changes = extract_status_changes(issue, timeline)
    state = initial_state(issue, config)
    periods: list[ActiveWorkPeriod] = []
    for change in changes:
        state, completed = process_status_change(state, change, config)
        if completed is not None:
            periods.append(completed)
    final = finalize_state(issue, state, now, config)
    if final is not None:
        periods.append(final)
    logger.debug("%s: %d active periods", issue.key, len(periods))
    return periods
