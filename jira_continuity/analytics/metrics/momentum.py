"""Momentum score: a 1-10 blend of four sub-scores.

=========================  ======  ==========================================
Sub-score                  Weight  Measures
=========================  ======  ==========================================
progress consistency       0.35    regularity of change-log updates
communication frequency    0.25    comment volume and author diversity
stagnation impact          0.30    total, longest and count of stagnations
context switching          0.10    assignee churn and ping-pong reassignment
=========================  ======  ==========================================
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from jira_continuity.core.calendar import ensure_utc, issue_end_date
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import CommentModel, IssueSnapshot, StagnationPeriod

from .statistics import clamp, coefficient_of_variation, round_half_up

SECONDS_PER_DAY = 86400


def _days(start: datetime, end: datetime) -> float:
    return (ensure_utc(end) - ensure_utc(start)).total_seconds() / SECONDS_PER_DAY


# -----------------------------------------------------------------------------
# Progress consistency
# -----------------------------------------------------------------------------
def calculate_update_gaps(issue: IssueSnapshot, end: datetime) -> tuple[list[float], list[datetime]]:
    """Update timeline (creation, each history entry, end) and the day gaps between."""
    updates = [ensure_utc(issue.created)]
    updates.extend(sorted(ensure_utc(h.created) for h in issue.histories))
    updates.append(ensure_utc(end))
    gaps = [_days(a, b) for a, b in zip(updates, updates[1:])]
    return gaps, updates


def calculate_variation_penalty(cov: float) -> int:
    if cov > 2.0:
        return 5
    if cov > 1.5:
        return 4
    if cov > 1.0:
        return 3
    if cov > 0.75:
        return 2
    if cov > 0.5:
        return 1
    return 0


def calculate_update_frequency_penalty(updates_per_day: float) -> int:
    if updates_per_day < 0.1:
        return 3
    if updates_per_day < 0.2:
        return 2
    if updates_per_day < 0.3:
        return 1
    return 0


def calculate_final_consistency_score(cov: float, updates_per_day: float) -> int:
    score = 10 - calculate_variation_penalty(cov) - calculate_update_frequency_penalty(updates_per_day)
    return int(clamp(score, 1, 10))


def calculate_progress_consistency_score(issue: IssueSnapshot, now: datetime) -> int:
    """3 with no history; 10 for issues younger than 3 days; otherwise penalised."""
    if not issue.histories:
        return 3
    end = issue_end_date(issue, now)
    total_days = _days(issue.created, end)
    if total_days < 3:
        return 10
    gaps, updates = calculate_update_gaps(issue, end)
    cov = coefficient_of_variation(gaps)
    updates_per_day = len(updates) / total_days
    return calculate_final_consistency_score(cov, updates_per_day)


# -----------------------------------------------------------------------------
# Communication frequency
# -----------------------------------------------------------------------------
def calculate_comment_volume_score(count: int) -> int:
    if count >= 15:
        return 10
    if count >= 10:
        return 9
    if count >= 8:
        return 8
    if count >= 6:
        return 7
    if count >= 4:
        return 6
    if count == 3:
        return 5
    if count == 2:
        return 4
    return 3


def calculate_author_diversity_bonus(comments: Sequence[CommentModel]) -> int:
    authors = {c.author for c in comments if c.author}
    if len(authors) >= 4:
        return 2
    if len(authors) == 3:
        return 1
    return 0


def calculate_communication_frequency_score(comments: Sequence[CommentModel]) -> int:
    score = calculate_comment_volume_score(len(comments)) + calculate_author_diversity_bonus(comments)
    return min(10, score)


# -----------------------------------------------------------------------------
# Stagnation impact
# -----------------------------------------------------------------------------
def calculate_total_stagnation_penalty(total_days: int) -> int:
    if total_days > 30:
        return 5
    if total_days > 20:
        return 4
    if total_days > 15:
        return 3
    if total_days > 10:
        return 2
    if total_days > 5:
        return 1
    return 0


def calculate_longest_stagnation_penalty(longest_days: int) -> int:
    if longest_days > 15:
        return 3
    if longest_days > 10:
        return 2
    if longest_days > 7:
        return 1
    return 0


def calculate_stagnation_frequency_penalty(count: int) -> int:
    if count >= 4:
        return 2
    if count >= 2:
        return 1
    return 0


def calculate_stagnation_impact_score(periods: Sequence[StagnationPeriod]) -> int:
    if not periods:
        return 10
    durations = [p.duration_days for p in periods]
    score = (
        10
        - calculate_total_stagnation_penalty(sum(durations))
        - calculate_longest_stagnation_penalty(max(durations))
        - calculate_stagnation_frequency_penalty(len(periods))
    )
    return int(clamp(score, 1, 10))


# -----------------------------------------------------------------------------
# Context switching
# -----------------------------------------------------------------------------
def calculate_assignee_change_frequency_penalty(count: int) -> int:
    if count > 5:
        return 5
    if count > 3:
        return 3
    if count > 2:
        return 2
    if count > 1:
        return 1
    return 0


def calculate_back_and_forth_penalty(targets: Sequence[str | None]) -> int:
    """2 when fewer distinct targets than reassignments (someone came back)."""
    distinct = {t for t in targets if t}
    if len(targets) > 1 and len(distinct) < len(targets):
        return 2
    return 0


def calculate_context_switching_score(issue: IssueSnapshot) -> int:
    """7 (neutral) for an empty change log; 10 minus churn penalties otherwise."""
    if not issue.histories:
        return 7
    targets = [entry.item_for("assignee").to_value for entry in issue.histories if entry.touches("assignee")]
    score = 10 - calculate_assignee_change_frequency_penalty(len(targets)) - calculate_back_and_forth_penalty(targets)
    return int(clamp(score, 1, 10))


# -----------------------------------------------------------------------------
# Blend
# -----------------------------------------------------------------------------
def analyze_momentum_indicators(
    issue: IssueSnapshot,
    comments: Sequence[CommentModel],
    stagnation_periods: Sequence[StagnationPeriod],
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> int:
    """Weighted blend of the four sub-scores, rounded half-up into ``[1, 10]``."""
    weights = config.momentum_weights
    blended = (
        calculate_progress_consistency_score(issue, now) * weights["progress_consistency"]
        + calculate_communication_frequency_score(comments) * weights["communication_frequency"]
        + calculate_stagnation_impact_score(stagnation_periods) * weights["stagnation_impact"]
        + calculate_context_switching_score(issue) * weights["context_switches"]
    )
    return int(clamp(round_half_up(blended), 1, 10))
