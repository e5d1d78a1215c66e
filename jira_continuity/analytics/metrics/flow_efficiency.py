"""Flow efficiency: share of an issue's lifetime spent in active statuses."""

from __future__ import annotations

from datetime import datetime

from jira_continuity.core.calendar import hours_between, issue_end_date
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import ActiveWorkPeriod, IssueSnapshot
from jira_continuity.core.timeline import IssueTimeline

from .active_periods import find_active_periods
from .statistics import clamp


def calculate_flow_efficiency(
    issue: IssueSnapshot,
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
    *,
    periods: list[ActiveWorkPeriod] | None = None,
    timeline: IssueTimeline | None = None,
) -> float:
    """Percentage (0-100) of elapsed time covered by active work periods.

    Returns 0 without looking at the change log when the lifetime is not positive.
    """
    total_hours = hours_between(issue.created, issue_end_date(issue, now))
    if total_hours <= 0:
        return 0.0
    if periods is None:
        periods = find_active_periods(issue, now, config, timeline)
    active_hours = sum(p.duration_hours for p in periods)
    return clamp(active_hours / total_hours * 100, 0.0, 100.0)
