"""Work fragmentation score over active work periods."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import NamedTuple

from jira_continuity.core.calendar import ensure_utc, hours_between
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import ActiveWorkPeriod, IssueSnapshot, WorkFragmentation
from jira_continuity.core.timeline import IssueTimeline

from .active_periods import find_active_periods
from .statistics import clamp, coefficient_of_variation, mean, pstdev, round_half_up


class PeriodStatistics(NamedTuple):
    total_hours: float
    average_hours: float
    std_dev: float
    coeff_of_variation: float


def calculate_period_count_penalty(count: int) -> int:
    """0 for a single period, growing to 100 at ten or more periods."""
    if count <= 1:
        return 0
    if count <= 3:
        return 10 * (count - 1)
    if count <= 5:
        return 20 + 15 * (count - 3)
    return 50 + 10 * min(5, count - 5)


def calculate_period_statistics(periods: Sequence[ActiveWorkPeriod]) -> PeriodStatistics:
    durations = [p.duration_hours for p in periods]
    return PeriodStatistics(
        total_hours=sum(durations),
        average_hours=mean(durations),
        std_dev=pstdev(durations),
        coeff_of_variation=coefficient_of_variation(durations),
    )


def calculate_active_ratio(periods: Sequence[ActiveWorkPeriod], total_hours: float) -> float:
    """Active hours over the span from the first period start to the last period end."""
    if not periods:
        return 0.0
    earliest = min((p.start for p in periods), key=ensure_utc)
    latest = max((p.end for p in periods), key=ensure_utc)
    span = hours_between(earliest, latest)
    if span <= 0 or total_hours <= 0:
        return 0.0
    return total_hours / span


def calculate_final_fragmentation_score(count: int, active_ratio: float, coeff_of_variation: float) -> int:
    count_penalty = calculate_period_count_penalty(count)
    ratio_penalty = round_half_up((1 - active_ratio) * 40)
    uniformity_penalty = min(30, round_half_up(coeff_of_variation * 30))
    return int(clamp(100 - count_penalty - ratio_penalty - uniformity_penalty, 0, 100))


def calculate_fragmentation_score(periods: Sequence[ActiveWorkPeriod]) -> int:
    if not periods:
        return 100
    stats = calculate_period_statistics(periods)
    ratio = calculate_active_ratio(periods, stats.total_hours)
    return calculate_final_fragmentation_score(len(periods), ratio, stats.coeff_of_variation)


def analyze_work_fragmentation(
    issue: IssueSnapshot,
    now: datetime,
    config: ContinuityConfig = DEFAULT_CONFIG,
    *,
    periods: list[ActiveWorkPeriod] | None = None,
    timeline: IssueTimeline | None = None,
) -> WorkFragmentation:
    if periods is None:
        periods = find_active_periods(issue, now, config, timeline)
    return WorkFragmentation(fragmentation_score=calculate_fragmentation_score(periods), periods=list(periods))
