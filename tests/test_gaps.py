from datetime import UTC, datetime

from jira_continuity.analytics.metrics.gaps import (
    TouchEvent,
    collect_communication_events,
    collect_update_events,
    find_gaps,
    identify_communication_gaps,
    identify_stagnation_periods,
)
from jira_continuity.core.config import ContinuityConfig
from jira_continuity.core.models import ChangeItem, CommentModel, HistoryEntry, IssueSnapshot


def _dt(day, hour=10):
    return datetime(2023, 1, day, hour, tzinfo=UTC)


def _entry(day, field, frm, to):
    return HistoryEntry(created=_dt(day), items=[ChangeItem(field, frm, to)])


def _comment(day, author="Alice", text="note"):
    return CommentModel(author=author, created=_dt(day), body_text=text)


def test_single_stagnation_before_work_starts():
    issue = IssueSnapshot(
        key="OBS-30",
        created=_dt(1),
        histories=[_entry(5, "status", "To Do", "In Progress")],
    )
    periods = identify_stagnation_periods(issue)
    assert len(periods) == 1
    period = periods[0]
    assert period.start == _dt(1)
    assert period.end == _dt(5)
    assert period.duration_days == 4
    assert period.status == "Unknown"
    assert period.assignee is None


def test_stagnation_carries_context_at_gap_start():
    issue = IssueSnapshot(
        key="OBS-31",
        created=_dt(2),
        status="Done",
        assignee="Bob",
        resolution_date=_dt(20),
        histories=[
            _entry(2, "status", "To Do", "In Progress"),
            _entry(13, "status", "In Progress", "Done"),
        ],
    )
    periods = identify_stagnation_periods(issue)
    assert [(p.start, p.end) for p in periods] == [(_dt(2), _dt(13)), (_dt(13), _dt(20))]
    assert periods[0].status == "In Progress"
    assert periods[0].assignee == "Bob"
    assert periods[1].status == "Done"


def test_raising_threshold_never_adds_periods():
    issue = IssueSnapshot(
        key="OBS-32",
        created=_dt(1),
        histories=[_entry(5, "status", "To Do", "In Progress"), _entry(20, "labels", None, "x")],
    )
    counts = [len(identify_stagnation_periods(issue, threshold=t)) for t in range(1, 15)]
    assert counts == sorted(counts, reverse=True)
    assert identify_stagnation_periods(issue, threshold=5)[0].start == _dt(5)


def test_detection_is_idempotent():
    issue = IssueSnapshot(key="OBS-33", created=_dt(1), histories=[_entry(12, "summary", "a", "b")])
    assert identify_stagnation_periods(issue) == identify_stagnation_periods(issue)


def test_threshold_from_config():
    issue = IssueSnapshot(key="OBS-34", created=_dt(1), histories=[_entry(5, "status", "A", "B")])
    assert identify_stagnation_periods(issue, ContinuityConfig(stagnation_threshold_days=5)) == []


def test_find_gaps_needs_two_events():
    assert find_gaps([TouchEvent(_dt(2))], threshold=0) == []
    assert find_gaps([], threshold=0) == []


def test_find_gaps_sorts_events():
    gaps = find_gaps([TouchEvent(_dt(16)), TouchEvent(_dt(2))], threshold=3)
    assert len(gaps) == 1
    assert gaps[0].start.timestamp == _dt(2)
    assert gaps[0].business_days == 11


def test_update_events_include_resolution():
    issue = IssueSnapshot(
        key="OBS-35",
        created=_dt(2),
        resolution_date=_dt(9),
        histories=[_entry(3, "status", "A", "B")],
    )
    events = collect_update_events(issue)
    assert [e.timestamp for e in events] == [_dt(2), _dt(3), _dt(9)]


def test_communication_gap_between_comments():
    issue = IssueSnapshot(key="OBS-36", created=_dt(2))
    gaps = identify_communication_gaps(issue, [_comment(3), _comment(16)])
    assert len(gaps) == 1
    assert gaps[0].start == _dt(3)
    assert gaps[0].end == _dt(16)
    assert gaps[0].duration_days == 10


def test_description_edit_counts_as_communication():
    issue = IssueSnapshot(
        key="OBS-37",
        created=_dt(2),
        histories=[_entry(9, "description", "old", "new"), _entry(11, "status", "A", "B")],
    )
    events = collect_communication_events(issue, [_comment(3), _comment(16)])
    assert _dt(9) in [e.timestamp for e in events]
    assert _dt(11) not in [e.timestamp for e in events]
    gaps = identify_communication_gaps(issue, [_comment(3), _comment(16)])
    assert [g.duration_days for g in gaps] == [5, 6]


def test_no_communication_gaps_for_chatty_issue():
    issue = IssueSnapshot(key="OBS-38", created=_dt(2))
    comments = [_comment(day) for day in range(3, 20)]
    assert identify_communication_gaps(issue, comments) == []


def test_stagnation_status_cleans_null_like_values():
    issue = IssueSnapshot(
        key="OBS-39",
        created=_dt(1),
        status="null",
        histories=[_entry(12, "labels", None, "dome")],
    )
    periods = identify_stagnation_periods(issue)
    assert [p.status for p in periods] == ["Unknown"]
