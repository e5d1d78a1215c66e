import json
from datetime import UTC, datetime

from jira_continuity.analytics.continuity import get_continuity_analysis
from jira_continuity.core.config import ContinuityConfig
from jira_continuity.core.models import ChangeItem, CommentModel, HistoryEntry, IssueSnapshot

NOW = datetime(2023, 3, 1, tzinfo=UTC)


def _dt(day, hour=9):
    return datetime(2023, 1, day, hour, tzinfo=UTC)


def _sample_issue():
    return IssueSnapshot(
        key="OBS-80",
        created=_dt(2),
        resolution_date=_dt(20),
        status="Done",
        assignee="Bob",
        summary="Fix dome encoder",
        histories=[
            HistoryEntry(created=_dt(3), items=[ChangeItem("assignee", None, "Alice")]),
            HistoryEntry(created=_dt(3, 10), items=[ChangeItem("status", "To Do", "In Progress")]),
            HistoryEntry(created=_dt(5), items=[ChangeItem("status", "In Progress", "Blocked")]),
            HistoryEntry(created=_dt(12), items=[ChangeItem("status", "Blocked", "In Progress")]),
            HistoryEntry(created=_dt(18), items=[ChangeItem("assignee", "Alice", "Bob")]),
            HistoryEntry(created=_dt(19), items=[ChangeItem("description", "old", "new")]),
            HistoryEntry(created=_dt(20), items=[ChangeItem("status", "In Progress", "Done")]),
        ],
    )


def _sample_comments():
    return [
        CommentModel(author="Alice", created=_dt(4, 10), body_text="Can you share the logs?"),
        CommentModel(author="Bob", created=_dt(4, 12), body_text="Attached."),
        CommentModel(author="Carol", created=_dt(16), body_text="Status?"),
    ]


def test_full_analysis():
    result = get_continuity_analysis(_sample_issue(), _sample_comments(), now=NOW)
    assert 0 <= result.flow_efficiency <= 100
    assert result.work_fragmentation.active_work_periods == 2
    assert result.longest_stagnation_period == max(p.duration_days for p in result.stagnation_periods)
    assert result.context_switches.count == 2
    assert result.context_switches.impact == "Significant - late stage assignee changes"
    assert 1 <= result.momentum_score <= 10
    assert {c.field for c in result.late_stage_changes} == {"assignee", "description"}
    assert result.feedback_response_time == 2.0


def test_analysis_is_deterministic_with_fixed_now():
    a = get_continuity_analysis(_sample_issue(), _sample_comments(), now=NOW)
    b = get_continuity_analysis(_sample_issue(), list(reversed(_sample_comments())), now=NOW)
    assert a.to_dict() == b.to_dict()


def test_to_dict_wire_form():
    payload = get_continuity_analysis(_sample_issue(), _sample_comments(), now=NOW).to_dict()
    assert set(payload) == {
        "flowEfficiency",
        "stagnationPeriods",
        "longestStagnationPeriod",
        "communicationGaps",
        "contextSwitches",
        "momentumScore",
        "workFragmentation",
        "lateStageChanges",
        "feedbackResponseTime",
    }
    assert payload["workFragmentation"]["periods"][0]["startDate"] == "2023-01-03T10:00:00+00:00"
    assert payload["contextSwitches"]["timing"][0]["toAssignee"] == "Alice"
    json.dumps(payload)


def test_minimal_issue_without_history():
    issue = IssueSnapshot(key="OBS-81", created=_dt(2), status="To Do")
    result = get_continuity_analysis(issue, now=_dt(3))
    assert result.flow_efficiency == 0.0
    assert result.stagnation_periods == []
    assert result.longest_stagnation_period == 0
    assert result.context_switches.impact == "None"
    assert result.work_fragmentation.fragmentation_score == 100
    assert result.late_stage_changes == []
    assert result.feedback_response_time == 0.0


def test_config_is_injected():
    strict = ContinuityConfig(stagnation_threshold_days=1, communication_gap_threshold_days=1)
    loose = get_continuity_analysis(_sample_issue(), _sample_comments(), now=NOW)
    tight = get_continuity_analysis(_sample_issue(), _sample_comments(), config=strict, now=NOW)
    assert len(tight.stagnation_periods) >= len(loose.stagnation_periods)
    assert len(tight.communication_gaps) >= len(loose.communication_gaps)
