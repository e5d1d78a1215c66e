"""Central configuration, constants, and the continuity engine settings."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

# =============================================================================
# Jira Connection Settings
# =============================================================================
JIRA_DEFAULT_SERVER = "https://your-domain.atlassian.net"
TIMEZONE = "America/Santiago"  # display timezone for dashboard charts/tables
CALENDAR_TIMEZONE = "UTC"  # timezone used to split instants into calendar days

# =============================================================================
# Jira Custom Field IDs
# =============================================================================
FIELD_IDS = {
    "story_points": "customfield_10016",
    "epic_link": "customfield_10014",
}

# Canonical field list for Jira fetches (excluding changelog expands)
JIRA_FETCH_BASE_FIELDS = [
    "summary",
    "description",
    "created",
    "updated",
    "assignee",
    "reporter",
    "priority",
    "status",
    "resolution",
    "resolutiondate",
    "comment",
    "issuetype",
    "labels",
]

# Search results embed only the first page of comments; refetch truncated ones
COMMENT_HYDRATION_MAX_WORKERS = 8
COMMENT_HYDRATION_MIN_PARALLEL = 4  # below this, stay sequential to reduce overhead

# =============================================================================
# Status Classification
# =============================================================================
# A status is active when it contains any of these (lowercase substring match)...
ACTIVE_STATUS_KEYWORDS: Sequence[str] = (
    "progress",
    "developing",
    "implementing",
    "coding",
    "working",
    "active",
)

# ...and none of these.
INACTIVE_STATUS_KEYWORDS: Sequence[str] = (
    "blocked",
    "waiting",
    "on hold",
    "pending",
    "review",
    "testing",
    "qa",
    "done",
    "resolved",
    "closed",
)

# Statuses that count as "active development" for context switch impact
ACTIVE_DEVELOPMENT_KEYWORDS: Sequence[str] = ("progress", "developing")

# =============================================================================
# Thresholds
# =============================================================================
DEFAULT_STAGNATION_THRESHOLD_DAYS: int = 3  # business days
DEFAULT_COMMUNICATION_GAP_THRESHOLD_DAYS: int = 5  # business days
DEFAULT_LATE_STAGE_THRESHOLD: float = 0.7  # fraction of elapsed lifetime
DEFAULT_MIN_ACTIVE_PERIOD_HOURS: float = 1.0  # shorter active periods are noise

# Field edits that count as communication touchpoints
COMMUNICATION_FIELDS: Sequence[str] = ("description", "summary", "priority", "labels")

# Fields whose late edits signal churn
SIGNIFICANT_FIELDS: Sequence[str] = (
    "description",
    "summary",
    "issuetype",
    "priority",
    "labels",
    "fixVersions",
    "components",
    "assignee",
    FIELD_IDS["story_points"],
    FIELD_IDS["epic_link"],
)

# =============================================================================
# Momentum Weights
# =============================================================================
MOMENTUM_FACTOR_WEIGHTS: dict[str, float] = {
    "progress_consistency": 0.35,  # consistent progress over time
    "communication_frequency": 0.25,  # regular communication
    "stagnation_impact": 0.30,  # lack of stagnation periods
    "context_switches": 0.10,  # minimal team handoffs
}

# =============================================================================
# Feedback Detection
# =============================================================================
QUESTION_PHRASES: Sequence[str] = (
    "can you",
    "could you",
    "would you",
    "what is",
    "what are",
    "how to",
    "how do",
    "please clarify",
    "please explain",
    "i need to know",
    "wondering if",
    "wondering how",
)

BUSINESS_DAY_START_HOUR: int = 9
BUSINESS_DAY_END_HOUR: int = 17


@dataclass(slots=True, frozen=True)
class ContinuityConfig:
    """Tunable knobs for one continuity analysis run.

    Every field defaults to the module constants above so callers only need
    to override what differs (e.g. ``ContinuityConfig(stagnation_threshold_days=5)``).
    """

    stagnation_threshold_days: int = DEFAULT_STAGNATION_THRESHOLD_DAYS
    communication_gap_threshold_days: int = DEFAULT_COMMUNICATION_GAP_THRESHOLD_DAYS
    late_stage_threshold: float = DEFAULT_LATE_STAGE_THRESHOLD
    late_switch_threshold: float = DEFAULT_LATE_STAGE_THRESHOLD
    min_active_period_hours: float = DEFAULT_MIN_ACTIVE_PERIOD_HOURS
    calendar_timezone: str = CALENDAR_TIMEZONE
    active_keywords: tuple[str, ...] = tuple(ACTIVE_STATUS_KEYWORDS)
    inactive_keywords: tuple[str, ...] = tuple(INACTIVE_STATUS_KEYWORDS)
    active_development_keywords: tuple[str, ...] = tuple(ACTIVE_DEVELOPMENT_KEYWORDS)
    communication_fields: tuple[str, ...] = tuple(COMMUNICATION_FIELDS)
    significant_fields: tuple[str, ...] = tuple(SIGNIFICANT_FIELDS)
    momentum_weights: dict[str, float] = field(default_factory=lambda: dict(MOMENTUM_FACTOR_WEIGHTS))
    question_phrases: tuple[str, ...] = tuple(QUESTION_PHRASES)
    business_hours_only: bool = True
    business_day_start_hour: int = BUSINESS_DAY_START_HOUR
    business_day_end_hour: int = BUSINESS_DAY_END_HOUR

    def __post_init__(self):
        # Partial weight overrides keep the remaining factors at their defaults
        merged = dict(MOMENTUM_FACTOR_WEIGHTS)
        merged.update(self.momentum_weights)
        object.__setattr__(self, "momentum_weights", merged)


DEFAULT_CONFIG = ContinuityConfig()


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"
    overview_max_issues: int = 200


SETTINGS = AppSettings()
