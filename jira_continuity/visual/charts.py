"""Chart builders (Altair) for continuity views."""

from __future__ import annotations

import altair as alt
import pandas as pd
import pytz

from jira_continuity.core.config import TIMEZONE

KIND_COLORS = alt.Scale(domain=["Active", "Stagnant"], range=["#2ca02c", "#d62728"])


def activity_timeline_chart(periods: pd.DataFrame, *, tz_name: str = TIMEZONE):
    """Gantt-style bars for active and stagnant periods, weekends shaded."""
    if periods.empty:
        return None
    tz = pytz.timezone(tz_name)
    tmp = periods.copy()
    tmp["start"] = pd.to_datetime(tmp["start"], utc=True, errors="coerce").dt.tz_convert(tz)
    tmp["end"] = pd.to_datetime(tmp["end"], utc=True, errors="coerce").dt.tz_convert(tz)
    tmp = tmp.dropna(subset=["start", "end"])
    if tmp.empty:
        return None

    bars = (
        alt.Chart(tmp)
        .mark_bar(height=18, opacity=0.85)
        .encode(
            x=alt.X("start:T", title="Date"),
            x2="end:T",
            y=alt.Y("kind:N", title=None),
            color=alt.Color("kind:N", scale=KIND_COLORS, legend=alt.Legend(title="Period")),
            tooltip=[
                alt.Tooltip("kind:N", title="Kind"),
                alt.Tooltip("status:N", title="Status"),
                alt.Tooltip("assignee:N", title="Assignee"),
                alt.Tooltip("start:T", title="Start", format="%Y-%m-%d %H:%M"),
                alt.Tooltip("end:T", title="End", format="%Y-%m-%d %H:%M"),
                alt.Tooltip("duration:N", title="Duration"),
            ],
        )
    )

    all_dates = pd.date_range(tmp["start"].min().normalize(), tmp["end"].max().normalize(), freq="D")
    days = pd.DataFrame({"date": all_dates})
    weekend = days[days["date"].dt.weekday.isin([5, 6])].copy()
    if weekend.empty:
        return bars.properties(height=140)
    weekend = weekend.assign(date_end=weekend["date"] + pd.Timedelta(days=1))
    shading = alt.Chart(weekend).mark_rect(color="#f2f2f2").encode(x="date:T", x2="date_end:T")
    return (shading + bars).properties(height=140)


def momentum_distribution_chart(summary: pd.DataFrame):
    """Histogram of momentum scores (1-10) across analyzed issues."""
    if summary.empty or "momentum_score" not in summary.columns:
        return None
    counts = (
        summary.groupby("momentum_score")["key"]
        .apply(lambda keys: "\n".join(str(k) for k in keys))
        .reset_index(name="tickets")
    )
    counts["count"] = counts["tickets"].str.count("\n") + 1
    scores = pd.DataFrame({"momentum_score": range(1, 11)})
    chart_df = scores.merge(counts, on="momentum_score", how="left")
    chart_df["count"] = chart_df["count"].fillna(0).astype(int)
    chart_df["tickets"] = chart_df["tickets"].fillna("").astype(str)
    return (
        alt.Chart(chart_df)
        .mark_bar(color="#1f77b4")
        .encode(
            x=alt.X("momentum_score:O", title="Momentum score"),
            y=alt.Y("count:Q", title="Issues"),
            tooltip=[
                alt.Tooltip("momentum_score:O", title="Score"),
                alt.Tooltip("count:Q", title="Issues"),
                alt.Tooltip("tickets:N", title="Tickets"),
            ],
        )
        .properties(height=260)
    )
