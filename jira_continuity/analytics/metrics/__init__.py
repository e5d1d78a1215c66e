"""Continuity metrics computed from a single issue snapshot."""

from jira_continuity.analytics.metrics.active_periods import find_active_periods
from jira_continuity.analytics.metrics.context_switches import analyze_context_switches
from jira_continuity.analytics.metrics.feedback import calculate_feedback_response_time
from jira_continuity.analytics.metrics.flow_efficiency import calculate_flow_efficiency
from jira_continuity.analytics.metrics.fragmentation import analyze_work_fragmentation
from jira_continuity.analytics.metrics.gaps import identify_communication_gaps, identify_stagnation_periods
from jira_continuity.analytics.metrics.late_stage import identify_late_stage_changes
from jira_continuity.analytics.metrics.momentum import analyze_momentum_indicators

__all__ = [
    "analyze_context_switches",
    "analyze_momentum_indicators",
    "analyze_work_fragmentation",
    "calculate_feedback_response_time",
    "calculate_flow_efficiency",
    "find_active_periods",
    "identify_communication_gaps",
    "identify_late_stage_changes",
    "identify_stagnation_periods",
]
