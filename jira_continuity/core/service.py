"""IssueService: fetches issues from Jira, maps them, and runs continuity analysis."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Any

import pandas as pd
import pytz

from jira_continuity.analytics.aggregations.continuity import continuity_summary_frame
from jira_continuity.analytics.continuity import get_continuity_analysis

from .config import (
    COMMENT_HYDRATION_MAX_WORKERS,
    COMMENT_HYDRATION_MIN_PARALLEL,
    DEFAULT_CONFIG,
    JIRA_FETCH_BASE_FIELDS,
    ContinuityConfig,
)
from .jira_client import JiraAPI
from .mappers import map_comments, map_issue
from .models import CommentModel, ContinuityAnalysisResult, IssueSnapshot

logger = logging.getLogger(__name__)

DEFAULT_FIELDS: Sequence[str] = tuple(JIRA_FETCH_BASE_FIELDS)
ProgressCallback = Callable[[str, int | None, int | None], None]


class IssueService:
    def __init__(self, api: JiraAPI | None, config: ContinuityConfig | None = None):
        self.api = api
        self.config = config or DEFAULT_CONFIG

    # ------------------ Fetch Methods ------------------
    def fetch_issue(self, issue_key: str) -> tuple[IssueSnapshot, list[CommentModel]]:
        raw = self.api.fetch_issue_raw(issue_key)
        if not raw:
            raise RuntimeError(f"Issue {issue_key} returned an empty payload")
        comments_raw = self.api.fetch_comments_raw(issue_key)
        return map_issue(raw), map_comments(comments_raw)

    # ------------------ Analysis ------------------
    def analyze_issue(self, issue_key: str, now: datetime | None = None) -> ContinuityAnalysisResult:
        issue, comments = self.fetch_issue(issue_key)
        return get_continuity_analysis(issue, comments, config=self.config, now=now)

    def analyze_raw(
        self,
        raw: dict[str, Any],
        comments: Sequence[dict[str, Any]] | dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> ContinuityAnalysisResult:
        """Analyze an already-fetched issue payload.

        When ``comments`` is omitted the comments embedded under
        ``fields.comment`` are used.
        """
        if comments is None:
            comments = ((raw.get("fields") or {}).get("comment") or {}).get("comments", [])
        issue = map_issue(raw, now=now)
        return get_continuity_analysis(issue, map_comments(comments), config=self.config, now=now)

    def analyze_jql(
        self,
        jql: str,
        *,
        max_issues: int | None = None,
        now: datetime | None = None,
        progress: ProgressCallback | None = None,
    ) -> pd.DataFrame:
        """Analyze every issue matched by ``jql``; one summary row per issue."""
        if now is None:
            now = datetime.now(pytz.UTC)
        if progress:
            progress("Querying issues", None, None)
        raw_issues = self.api.search_enhanced(
            jql,
            fields=list(DEFAULT_FIELDS),
            expand=["changelog"],
            max_results=max_issues,
        )
        self._inflate_truncated_comments(raw_issues, progress=progress)
        results: list[tuple[str, ContinuityAnalysisResult]] = []
        total = len(raw_issues)
        for idx, raw in enumerate(raw_issues, start=1):
            key = str(raw.get("key") or "")
            if progress:
                progress(f"Analyzing {key}", idx, total)
            results.append((key, self.analyze_raw(raw, now=now)))
        logger.info("Analyzed %d issues for %r", len(results), jql)
        return continuity_summary_frame(results)

    # ------------------ Internal Comment Inflation ------------------
    def _inflate_truncated_comments(
        self,
        raw_issues: list[dict[str, Any]],
        *,
        progress: ProgressCallback | None = None,
    ) -> None:
        """Replace truncated comment arrays with full lists (in-place).

        Jira search results embed only the first page of comments but report the
        real count in ``fields.comment.total``; those issues are refetched.
        """
        work: list[dict[str, Any]] = []
        for issue in raw_issues:
            comment_block = (issue.get("fields") or {}).get("comment") or {}
            comments_list = comment_block.get("comments") or []
            total = comment_block.get("total")
            if isinstance(total, int) and total > len(comments_list):
                work.append(issue)
        if not work:
            return

        if progress:
            progress("Loading complete comment history", 0, len(work))
        if len(work) < COMMENT_HYDRATION_MIN_PARALLEL:
            for idx, issue in enumerate(work, start=1):
                try:
                    self._hydrate_single_issue(issue)
                except RuntimeError as exc:
                    logger.warning("Hydration of %s failed: %s", issue.get("key"), exc)
                if progress:
                    progress("Loading complete comment history", idx, len(work))
            return

        completed = 0
        with ThreadPoolExecutor(max_workers=COMMENT_HYDRATION_MAX_WORKERS) as pool:
            futures = [pool.submit(self._hydrate_single_issue, iss) for iss in work]
            for fut in as_completed(futures):
                try:
                    fut.result()
                except RuntimeError as exc:
                    logger.warning("Hydration task failed: %s", exc)
                finally:
                    completed += 1
                    if progress:
                        progress("Loading complete comment history", completed, len(work))

    def _hydrate_single_issue(self, issue: dict[str, Any]) -> None:
        key = issue.get("key")
        if not key:
            return
        fields = issue.setdefault("fields", {})
        comment_block = fields.get("comment") or {}
        existing = comment_block.get("comments") or []
        full_comments = self.api.fetch_comments_raw(key)
        if len(full_comments) >= len(existing):
            comment_block["comments"] = full_comments
            comment_block["total"] = len(full_comments)
            fields["comment"] = comment_block
            logger.debug("Hydrated %s comments: %s -> %s", key, len(existing), len(full_comments))
