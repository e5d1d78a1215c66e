"""Feedback response time: how long questions in comments wait for an answer."""

from __future__ import annotations

from collections.abc import Sequence

from jira_continuity.core.calendar import business_hours_between, ensure_utc, hours_between
from jira_continuity.core.config import DEFAULT_CONFIG, ContinuityConfig
from jira_continuity.core.models import CommentModel, QuestionResponsePair

from .statistics import mean


def is_question(text: str | None, config: ContinuityConfig = DEFAULT_CONFIG) -> bool:
    if not text:
        return False
    if "?" in text:
        return True
    lowered = text.lower()
    return any(phrase in lowered for phrase in config.question_phrases)


def _response_hours(question: CommentModel, response: CommentModel, config: ContinuityConfig) -> float:
    if config.business_hours_only:
        return business_hours_between(
            question.created,
            response.created,
            config.calendar_timezone,
            config.business_day_start_hour,
            config.business_day_end_hour,
        )
    return max(0.0, hours_between(question.created, response.created))


def identify_question_response_pairs(
    comments: Sequence[CommentModel],
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> list[QuestionResponsePair]:
    """Pair each question with the first later comment from a different author."""
    ordered = sorted(comments, key=lambda c: ensure_utc(c.created))
    pairs: list[QuestionResponsePair] = []
    for idx, comment in enumerate(ordered):
        if not is_question(comment.body_text, config):
            continue
        author = comment.author or ""
        response = next((c for c in ordered[idx + 1 :] if (c.author or "") != author), None)
        if response is None:
            continue
        pairs.append(
            QuestionResponsePair(
                question_at=comment.created,
                response_at=response.created,
                response_time_hours=_response_hours(comment, response, config),
            )
        )
    return pairs


def calculate_feedback_response_time(
    comments: Sequence[CommentModel],
    config: ContinuityConfig = DEFAULT_CONFIG,
) -> float:
    """Mean response latency in hours across question/response pairs, or 0."""
    pairs = identify_question_response_pairs(comments, config)
    return mean([p.response_time_hours for p in pairs])
