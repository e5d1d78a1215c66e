from datetime import UTC, datetime

from jira_continuity.core.mappers import flatten_adf, map_comments, map_issue, parse_dt


def _adf(*paragraphs):
    return {
        "type": "doc",
        "version": 1,
        "content": [{"type": "paragraph", "content": [{"type": "text", "text": p}]} for p in paragraphs],
    }


def _sample_raw():
    return {
        "key": "OBS-90",
        "fields": {
            "summary": "Encoder drift",
            "description": _adf("First line", "Second line"),
            "created": "2024-09-02T10:00:00.000+0000",
            "resolutiondate": None,
            "status": {"name": "In Progress"},
            "assignee": {"displayName": "Alice"},
            "priority": {"name": "High"},
            "labels": ["dome", "encoder"],
            "comment": {"comments": [], "total": 0},
        },
        "changelog": {
            "histories": [
                {
                    "id": "1",
                    "author": {"displayName": "Bob"},
                    "created": "2024-09-03T12:30:00.000-0300",
                    "items": [
                        {"field": "status", "fromString": "To Do", "toString": "In Progress"},
                        {"field": "assignee", "fromString": None, "toString": "Alice"},
                    ],
                },
                {"id": "2", "created": None, "items": [{"field": "summary", "fromString": "a", "toString": "b"}]},
            ]
        },
    }


def test_parse_dt_variants():
    assert parse_dt("2024-09-02T10:00:00.000+0000") == datetime(2024, 9, 2, 10, tzinfo=UTC)
    assert parse_dt("2024-09-03T12:30:00.000-0300") == datetime(2024, 9, 3, 15, 30, tzinfo=UTC)
    assert parse_dt(datetime(2024, 9, 2, 10)) == datetime(2024, 9, 2, 10, tzinfo=UTC)
    assert parse_dt("") is None
    assert parse_dt(None) is None
    assert parse_dt("not a date") is None


def test_map_issue_fields():
    issue = map_issue(_sample_raw())
    assert issue.key == "OBS-90"
    assert issue.status == "In Progress"
    assert issue.assignee == "Alice"
    assert issue.priority == "High"
    assert issue.labels == ["dome", "encoder"]
    assert issue.resolution_date is None
    assert issue.description.kind == "doc"
    assert issue.description.plain_text() == "First line\nSecond line"


def test_map_issue_histories_drop_missing_timestamps():
    issue = map_issue(_sample_raw())
    assert len(issue.histories) == 1
    entry = issue.histories[0]
    assert entry.author == "Bob"
    assert entry.created == datetime(2024, 9, 3, 15, 30, tzinfo=UTC)
    assert [i.field for i in entry.items] == ["status", "assignee"]
    assert entry.item_for("assignee").from_value is None


def test_map_issue_missing_created_uses_earliest_history():
    raw = _sample_raw()
    raw["fields"]["created"] = None
    issue = map_issue(raw)
    assert issue.created == datetime(2024, 9, 3, 15, 30, tzinfo=UTC)


def test_map_issue_plain_description():
    raw = _sample_raw()
    raw["fields"]["description"] = "plain text"
    issue = map_issue(raw)
    assert issue.description.kind == "text"
    assert issue.description.plain_text() == "plain text"


def test_map_comments_flattens_bodies():
    comments = map_comments(
        {
            "comments": [
                {"author": {"displayName": "Carol"}, "created": "2024-09-04T09:00:00.000+0000", "body": _adf("Why?")},
                {"author": None, "created": "2024-09-04T10:00:00.000+0000", "body": "plain"},
                {"author": {"displayName": "Dan"}, "created": None, "body": "dropped"},
            ]
        }
    )
    assert [(c.author, c.body_text) for c in comments] == [("Carol", "Why?"), (None, "plain")]


def test_map_comments_empty():
    assert map_comments(None) == []
    assert map_comments([]) == []


def test_flatten_adf_nested():
    node = {
        "type": "doc",
        "content": [
            {
                "type": "bulletList",
                "content": [
                    {"type": "listItem", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "a"}]}]},
                    {"type": "listItem", "content": [{"type": "paragraph", "content": [{"type": "text", "text": "b"}]}]},
                ],
            }
        ],
    }
    assert flatten_adf(node) == "a b"
    assert flatten_adf("not a node") == ""
