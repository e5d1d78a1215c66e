from datetime import UTC, datetime

from jira_continuity.analytics.aggregations.continuity import (
    SUMMARY_COLUMNS,
    context_switch_frame,
    continuity_summary_frame,
    gaps_frame,
    late_changes_frame,
    periods_frame,
)
from jira_continuity.core.models import (
    ActiveWorkPeriod,
    CommunicationGap,
    ContextSwitchAnalysis,
    ContextSwitchEvent,
    ContinuityAnalysisResult,
    LateStageChange,
    StagnationPeriod,
    WorkFragmentation,
)


def _dt(day, hour=9):
    return datetime(2024, 9, day, hour, tzinfo=UTC)


def _sample_result(momentum=5, flow=50.0, with_details=False):
    periods = []
    stagnation = []
    gaps = []
    switches = ContextSwitchAnalysis(count=0)
    late = []
    if with_details:
        periods = [ActiveWorkPeriod(_dt(3), _dt(4), 24.0, "In Progress", None)]
        stagnation = [StagnationPeriod(_dt(4), _dt(12), 7, "Blocked", "Alice")]
        gaps = [CommunicationGap(_dt(2), _dt(12), 9)]
        switches = ContextSwitchAnalysis(
            count=1,
            timing=[ContextSwitchEvent(_dt(11), None, "Alice", None, 9)],
            impact="Minimal",
        )
        late = [LateStageChange(_dt(12), "description", "Updated description", 83.3)]
    return ContinuityAnalysisResult(
        flow_efficiency=flow,
        stagnation_periods=stagnation,
        longest_stagnation_period=max((s.duration_days for s in stagnation), default=0),
        communication_gaps=gaps,
        context_switches=switches,
        momentum_score=momentum,
        work_fragmentation=WorkFragmentation(fragmentation_score=0, periods=periods),
        late_stage_changes=late,
        feedback_response_time=1.25,
    )


def test_summary_sorted_worst_momentum_first():
    df = continuity_summary_frame(
        [
            ("OBS-1", _sample_result(momentum=8, flow=70.0)),
            ("OBS-2", _sample_result(momentum=3, flow=40.0)),
            ("OBS-3", _sample_result(momentum=3, flow=10.0)),
        ]
    )
    assert list(df.columns) == SUMMARY_COLUMNS
    assert list(df["key"]) == ["OBS-3", "OBS-2", "OBS-1"]


def test_summary_row_values():
    df = continuity_summary_frame([("OBS-9", _sample_result(flow=33.333, with_details=True))])
    row = df.iloc[0]
    assert row["flow_efficiency"] == 33.3
    assert row["active_work_periods"] == 1
    assert row["stagnation_count"] == 1
    assert row["longest_stagnation_days"] == 7
    assert row["communication_gap_count"] == 1
    assert row["context_switch_impact"] == "Minimal"
    assert row["late_stage_change_count"] == 1
    assert row["feedback_response_hours"] == 1.2


def test_summary_empty():
    df = continuity_summary_frame([])
    assert df.empty
    assert list(df.columns) == SUMMARY_COLUMNS


def test_periods_frame_merges_kinds():
    df = periods_frame(_sample_result(with_details=True))
    assert list(df["kind"]) == ["Active", "Stagnant"]
    assert list(df["assignee"]) == ["Unassigned", "Alice"]
    assert df.loc[1, "duration"] == "7 business days"
    assert str(df["start"].dt.tz) == "UTC"


def test_periods_frame_empty():
    df = periods_frame(_sample_result())
    assert df.empty
    assert list(df.columns) == ["kind", "start", "end", "status", "assignee", "duration"]


def test_detail_frames():
    result = _sample_result(with_details=True)
    assert gaps_frame(result)["business_days"].tolist() == [9]
    switches = context_switch_frame(result)
    assert switches.loc[0, "from_assignee"] == "Unassigned"
    assert switches.loc[0, "status"] == "Unknown"
    assert late_changes_frame(result)["field"].tolist() == ["description"]
