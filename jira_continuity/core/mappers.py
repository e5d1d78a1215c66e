"""Mapping raw Jira issue JSON into IssueSnapshot / CommentModel instances."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

import pandas as pd
import pytz

from .models import ChangeItem, CommentModel, HistoryEntry, IssueSnapshot, RichText, flatten_adf

logger = logging.getLogger(__name__)

__all__ = ["flatten_adf", "map_comments", "map_issue", "parse_dt"]


def parse_dt(val: Any) -> datetime | None:
    """Parse a Jira timestamp into an aware UTC datetime (None when unparseable)."""
    if val is None or val == "":
        return None
    if isinstance(val, datetime):
        return val.astimezone(pytz.UTC) if val.tzinfo else pytz.UTC.localize(val)
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _name(value: Any, key: str = "displayName") -> str | None:
    if isinstance(value, dict):
        return value.get(key)
    if isinstance(value, str):
        return value or None
    return None


def _map_history(raw: dict[str, Any]) -> HistoryEntry | None:
    created = parse_dt(raw.get("created"))
    if created is None:
        logger.debug("Dropping change-log entry %s without a timestamp", raw.get("id"))
        return None
    items = [
        ChangeItem(
            field=str(item.get("field")),
            from_value=item.get("fromString"),
            to_value=item.get("toString"),
        )
        for item in raw.get("items") or []
        if isinstance(item, dict) and item.get("field")
    ]
    return HistoryEntry(created=created, items=items, author=_name(raw.get("author")))


def map_issue(raw: dict[str, Any], now: datetime | None = None) -> IssueSnapshot:
    """Build an IssueSnapshot from REST v3 JSON (``fields`` + ``changelog.histories``)."""
    fields = raw.get("fields") or {}
    histories_raw = (raw.get("changelog") or {}).get("histories", []) or []
    histories = [h for h in (_map_history(h) for h in histories_raw if isinstance(h, dict)) if h is not None]
    if len(histories) < len(histories_raw):
        logger.warning(
            "%s: dropped %d change-log entries without timestamps",
            raw.get("key"),
            len(histories_raw) - len(histories),
        )

    created = parse_dt(fields.get("created"))
    if created is None:
        if histories:
            created = min(h.created for h in histories)
        else:
            created = now or datetime.now(pytz.UTC)
        logger.warning("%s: missing created date, using %s", raw.get("key"), created.isoformat())

    return IssueSnapshot(
        key=str(raw.get("key") or ""),
        created=created,
        resolution_date=parse_dt(fields.get("resolutiondate")),
        status=_name(fields.get("status"), "name"),
        assignee=_name(fields.get("assignee")),
        summary=fields.get("summary"),
        description=RichText.from_raw(fields.get("description")),
        priority=_name(fields.get("priority"), "name"),
        labels=list(fields.get("labels", []) or []),
        histories=histories,
    )


def map_comments(raw_comments: Iterable[dict[str, Any]] | dict[str, Any] | None) -> list[CommentModel]:
    """Map a comment list (or a ``{"comments": [...]}`` page) into CommentModels."""
    if raw_comments is None:
        return []
    if isinstance(raw_comments, dict):
        raw_comments = raw_comments.get("comments", []) or []
    comments: list[CommentModel] = []
    for c in raw_comments:
        created = parse_dt(c.get("created"))
        if created is None:
            continue
        body = RichText.from_raw(c.get("body"))
        comments.append(
            CommentModel(
                author=_name(c.get("author")),
                created=created,
                body_text=body.plain_text() if body is not None else "",
            )
        )
    return comments
