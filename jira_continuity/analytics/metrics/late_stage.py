"""Significant field edits made late in an issue's lifetime."""

from __future__ import annotations

from datetime import datetime

from jira_continuity.core.calendar import ensure_utc, issue_end_date
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import ChangeItem, IssueSnapshot, LateStageChange
from jira_continuity.core.timeline import sorted_histories

from .statistics import round_half_up


def calculate_threshold_date(created: datetime, end: datetime, fraction: float) -> datetime:
    created = ensure_utc(created)
    return created + (ensure_utc(end) - created) * fraction


def calculate_completion_percentage(created: datetime, end: datetime, at: datetime) -> float:
    """Elapsed share of the lifetime at ``at``, two decimals; may exceed 100."""
    total = (ensure_utc(end) - ensure_utc(created)).total_seconds()
    if total <= 0:
        return 0.0
    elapsed = (ensure_utc(at) - ensure_utc(created)).total_seconds()
    return round_half_up(elapsed / total * 10000) / 100


def describe_change(item: ChangeItem) -> str:
    from_text = item.from_value if item.from_value else "none"
    to_text = item.to_value if item.to_value else "none"
    return f'Changed {item.field} from "{from_text}" to "{to_text}"'


def identify_late_stage_changes(
    issue: IssueSnapshot,
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> list[LateStageChange]:
    if not issue.histories:
        return []
    end = issue_end_date(issue, now)
    threshold = calculate_threshold_date(issue.created, end, config.late_stage_threshold)
    significant = set(config.significant_fields)
    changes: list[LateStageChange] = []
    for entry in sorted_histories(issue):
        if ensure_utc(entry.created) < threshold:
            continue
        percent = calculate_completion_percentage(issue.created, end, entry.created)
        for item in entry.items:
            if item.field not in significant:
                continue
            changes.append(
                LateStageChange(
                    date=entry.created,
                    field=item.field,
                    description=describe_change(item),
                    percent_complete=percent,
                )
            )
    return changes
