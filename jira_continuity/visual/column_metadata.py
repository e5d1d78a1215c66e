"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "float1" -> 1 decimal float, "float2" -> 2 decimals, None -> text
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    # Portfolio summary
    "flow_efficiency": (
        "Flow Efficiency (%)",
        "Share of the issue lifetime spent in an active status.",
        "float1",
    ),
    "momentum_score": (
        "Momentum",
        "1-10 blend of progress consistency, communication, stagnation and hand-offs.",
        "int",
    ),
    "fragmentation_score": (
        "Fragmentation",
        "0-100 score over active work periods (100 when no active period was found).",
        "int",
    ),
    "active_work_periods": ("Active Periods", "Distinct stretches of active work (1 hour or longer).", "int"),
    "stagnation_count": (
        "Stagnations",
        "Gaps between updates of at least the stagnation threshold (business days).",
        "int",
    ),
    "longest_stagnation_days": ("Longest Stagnation", "Longest stagnation in business days.", "int"),
    "communication_gap_count": (
        "Communication Gaps",
        "Gaps between comments or descriptive edits of at least the gap threshold.",
        "int",
    ),
    "context_switch_count": ("Assignee Changes", "Number of assignee changes in the change log.", "int"),
    "context_switch_impact": ("Hand-off Impact", "Likely effect of assignee changes on velocity.", None),
    "late_stage_change_count": (
        "Late Changes",
        "Edits to significant fields after 70% of the issue lifetime.",
        "int",
    ),
    "feedback_response_hours": (
        "Feedback Response (h)",
        "Average business hours between a question and the first answer from someone else.",
        "float1",
    ),
    # Detail tables
    "kind": ("Kind", "Active work or stagnation.", None),
    "start": ("Start", "Period start.", None),
    "end": ("End", "Period end.", None),
    "status": ("Status", "Workflow status during the period.", None),
    "assignee": ("Assignee", "Owner during the period.", None),
    "duration": ("Duration", "Hours for active periods, business days for stagnations.", None),
    "business_days": ("Business Days", "Weekdays covered by the gap (inclusive).", "int"),
    "date": ("Date", "When the change happened.", None),
    "from_assignee": ("From", "Previous assignee.", None),
    "to_assignee": ("To", "New assignee.", None),
    "days_from_start": ("Days From Start", "Business days since the issue was created.", "int"),
    "field": ("Field", "Changed field.", None),
    "description": ("Change", "Old and new value of the field.", None),
    "percent_complete": ("Lifetime Elapsed (%)", "Share of the lifetime elapsed at the change.", "float2"),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "float1":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.1f")
        elif fmt == "float2":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%.2f")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
