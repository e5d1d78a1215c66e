from datetime import UTC, datetime

from jira_continuity.analytics.metrics.late_stage import (
    calculate_completion_percentage,
    calculate_threshold_date,
    describe_change,
    identify_late_stage_changes,
)
from jira_continuity.core.config import FIELD_IDS, ContinuityConfig
from jira_continuity.core.models import ChangeItem, HistoryEntry, IssueSnapshot


def _dt(day, hour=0):
    return datetime(2023, 1, day, hour, tzinfo=UTC)


def _sample_issue():
    # 10-day lifetime, late stage from Jan 8
    return IssueSnapshot(
        key="OBS-70",
        created=_dt(1),
        resolution_date=_dt(11),
        status="Done",
        histories=[
            HistoryEntry(created=_dt(2), items=[ChangeItem("priority", "Low", "High")]),
            HistoryEntry(
                created=_dt(10),
                items=[ChangeItem("priority", "High", "Blocker"), ChangeItem("status", "In Progress", "Review")],
            ),
            HistoryEntry(created=_dt(9), items=[ChangeItem(FIELD_IDS["story_points"], None, "5")]),
        ],
    )


def test_threshold_date():
    assert calculate_threshold_date(_dt(1), _dt(11), 0.7) == _dt(8)


def test_completion_percentage():
    assert calculate_completion_percentage(_dt(1), _dt(4), _dt(2)) == 33.33
    assert calculate_completion_percentage(_dt(1), _dt(4), _dt(5)) == 133.33
    assert calculate_completion_percentage(_dt(4), _dt(4), _dt(5)) == 0.0


def test_describe_change():
    assert describe_change(ChangeItem("summary", "Old", "New")) == 'Changed summary from "Old" to "New"'
    assert describe_change(ChangeItem("labels", None, "")) == 'Changed labels from "none" to "none"'


def test_late_changes_in_time_order():
    changes = identify_late_stage_changes(_sample_issue(), now=_dt(30))
    assert [c.field for c in changes] == [FIELD_IDS["story_points"], "priority"]
    story, priority = changes
    assert story.percent_complete == 80.0
    assert story.description == f'Changed {FIELD_IDS["story_points"]} from "none" to "5"'
    assert priority.percent_complete == 90.0
    assert priority.date == _dt(10)


def test_no_history_no_changes():
    issue = IssueSnapshot(key="OBS-71", created=_dt(1), resolution_date=_dt(11))
    assert identify_late_stage_changes(issue, now=_dt(30)) == []


def test_custom_threshold_and_fields():
    config = ContinuityConfig(late_stage_threshold=0.0, significant_fields=("status",))
    changes = identify_late_stage_changes(_sample_issue(), now=_dt(30), config=config)
    assert [c.field for c in changes] == ["status"]


def test_unresolved_issue_uses_now():
    issue = IssueSnapshot(
        key="OBS-72",
        created=_dt(1),
        histories=[HistoryEntry(created=_dt(9), items=[ChangeItem("summary", "a", "b")])],
    )
    assert identify_late_stage_changes(issue, now=_dt(11))[0].percent_complete == 80.0
    assert identify_late_stage_changes(issue, now=_dt(21)) == []
