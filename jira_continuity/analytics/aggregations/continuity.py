"""DataFrame views over continuity analysis results."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import pandas as pd

from jira_continuity.core.models import ContinuityAnalysisResult
from jira_continuity.core.status import clean_status_name

SUMMARY_COLUMNS = [
    "key",
    "flow_efficiency",
    "momentum_score",
    "fragmentation_score",
    "active_work_periods",
    "stagnation_count",
    "longest_stagnation_days",
    "communication_gap_count",
    "context_switch_count",
    "context_switch_impact",
    "late_stage_change_count",
    "feedback_response_hours",
]


def result_to_row(key: str, result: ContinuityAnalysisResult) -> dict[str, Any]:
    return {
        "key": key,
        "flow_efficiency": round(result.flow_efficiency, 1),
        "momentum_score": result.momentum_score,
        "fragmentation_score": result.work_fragmentation.fragmentation_score,
        "active_work_periods": result.work_fragmentation.active_work_periods,
        "stagnation_count": len(result.stagnation_periods),
        "longest_stagnation_days": result.longest_stagnation_period,
        "communication_gap_count": len(result.communication_gaps),
        "context_switch_count": result.context_switches.count,
        "context_switch_impact": result.context_switches.impact,
        "late_stage_change_count": len(result.late_stage_changes),
        "feedback_response_hours": round(result.feedback_response_time, 1),
    }


def continuity_summary_frame(results: Iterable[tuple[str, ContinuityAnalysisResult]]) -> pd.DataFrame:
    """One row per issue, worst momentum first."""
    rows = [result_to_row(key, result) for key, result in results]
    if not rows:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)
    df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
    return df.sort_values(by=["momentum_score", "flow_efficiency"], ascending=[True, True]).reset_index(drop=True)


def periods_frame(result: ContinuityAnalysisResult) -> pd.DataFrame:
    """Active work periods and stagnation periods as one timeline frame."""
    rows = []
    for p in result.work_fragmentation.periods:
        rows.append(
            {
                "kind": "Active",
                "start": p.start,
                "end": p.end,
                "status": clean_status_name(p.status),
                "assignee": p.assignee or "Unassigned",
                "duration": f"{p.duration_hours:.1f} h",
            }
        )
    for s in result.stagnation_periods:
        rows.append(
            {
                "kind": "Stagnant",
                "start": s.start,
                "end": s.end,
                "status": s.status,
                "assignee": s.assignee or "Unassigned",
                "duration": f"{s.duration_days} business days",
            }
        )
    df = pd.DataFrame(rows, columns=["kind", "start", "end", "status", "assignee", "duration"])
    if df.empty:
        return df
    df["start"] = pd.to_datetime(df["start"], utc=True)
    df["end"] = pd.to_datetime(df["end"], utc=True)
    return df.sort_values(by="start").reset_index(drop=True)


def gaps_frame(result: ContinuityAnalysisResult) -> pd.DataFrame:
    rows = [
        {"start": g.start, "end": g.end, "business_days": g.duration_days} for g in result.communication_gaps
    ]
    return pd.DataFrame(rows, columns=["start", "end", "business_days"])


def context_switch_frame(result: ContinuityAnalysisResult) -> pd.DataFrame:
    rows = [
        {
            "date": e.date,
            "from_assignee": e.from_assignee or "Unassigned",
            "to_assignee": e.to_assignee or "Unassigned",
            "status": clean_status_name(e.status),
            "days_from_start": e.days_from_start,
        }
        for e in result.context_switches.timing
    ]
    return pd.DataFrame(rows, columns=["date", "from_assignee", "to_assignee", "status", "days_from_start"])


def late_changes_frame(result: ContinuityAnalysisResult) -> pd.DataFrame:
    rows = [
        {
            "date": c.date,
            "field": c.field,
            "description": c.description,
            "percent_complete": c.percent_complete,
        }
        for c in result.late_stage_changes
    ]
    return pd.DataFrame(rows, columns=["date", "field", "description", "percent_complete"])
