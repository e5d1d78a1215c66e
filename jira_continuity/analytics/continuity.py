"""Continuity analysis orchestrator.

Runs every continuity metric over one issue snapshot and its comments and
bundles them into a :class:`ContinuityAnalysisResult`. The clock is read at
most once per call; pass ``now`` explicitly for reproducible results.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

import pytz

from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import CommentModel, ContinuityAnalysisResult, IssueSnapshot
from jira_continuity.core.timeline import IssueTimeline

from .metrics.active_periods import find_active_periods
from .metrics.context_switches import analyze_context_switches
from .metrics.feedback import calculate_feedback_response_time
from .metrics.flow_efficiency import calculate_flow_efficiency
from .metrics.fragmentation import analyze_work_fragmentation
from .metrics.gaps import identify_communication_gaps, identify_stagnation_periods
from .metrics.late_stage import identify_late_stage_changes
from .metrics.momentum import analyze_momentum_indicators

logger = logging.getLogger(__name__)


def get_continuity_analysis(
    issue: IssueSnapshot,
    comments: Sequence[CommentModel] = (),
    *,
    config: ContinuityConfig | None = None,
    now: datetime | None = None,
) -> ContinuityAnalysisResult:
    """Compute every continuity metric for ``issue``.

    Parameters
    ----------
    issue : IssueSnapshot
        Current field values plus the change log.
    comments : Sequence[CommentModel]
        Issue comments in any order.
    config : ContinuityConfig, optional
        Thresholds and keyword tables; defaults to ``DEFAULT_CONFIG``.
    now : datetime, optional
        Stand-in end date for unresolved issues; defaults to the current UTC time.

    Returns
    -------
    ContinuityAnalysisResult
    """
    config = config or DEFAULT_CONFIG
    if now is None:
        now = datetime.now(pytz.UTC)
    comments = list(comments)
    timeline = IssueTimeline(issue)

    periods = find_active_periods(issue, now, config, timeline)
    stagnation = identify_stagnation_periods(issue, config, timeline=timeline)
    result = ContinuityAnalysisResult(
        flow_efficiency=calculate_flow_efficiency(issue, now, config, periods=periods),
        stagnation_periods=stagnation,
        longest_stagnation_period=max((p.duration_days for p in stagnation), default=0),
        communication_gaps=identify_communication_gaps(issue, comments, config),
        context_switches=analyze_context_switches(issue, now, config, timeline),
        momentum_score=analyze_momentum_indicators(issue, comments, stagnation, now, config),
        work_fragmentation=analyze_work_fragmentation(issue, now, config, periods=periods),
        late_stage_changes=identify_late_stage_changes(issue, now, config),
        feedback_response_time=calculate_feedback_response_time(comments, config),
    )
    logger.debug(
        "%s: flow=%.1f%% momentum=%d stagnations=%d switches=%d",
        issue.key,
        result.flow_efficiency,
        result.momentum_score,
        len(result.stagnation_periods),
        result.context_switches.count,
    )
    return result
