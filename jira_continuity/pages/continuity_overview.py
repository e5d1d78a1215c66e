"""Continuity overview page: score every issue matched by a JQL query."""

from __future__ import annotations

import logging

import pandas as pd
import streamlit as st

from jira_continuity.app import register_page
from jira_continuity.core.config import SETTINGS
from jira_continuity.core.service import IssueService
from jira_continuity.visual.charts import momentum_distribution_chart
from jira_continuity.visual.progress import ProgressReporter
from jira_continuity.visual.tables import render_table

logger = logging.getLogger(__name__)


@register_page("Continuity Overview")
def continuity_overview_page():
    st.title("Continuity Overview")
    st.caption("Momentum and flow efficiency across a set of issues, lowest momentum first.")
    service: IssueService | None = st.session_state.get("issue_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    jql = st.text_input(
        "JQL",
        value=st.session_state.get("overview_jql", "statusCategory != Done ORDER BY updated DESC"),
    )
    max_issues = st.number_input(
        "Max issues",
        min_value=1,
        max_value=5000,
        value=SETTINGS.overview_max_issues,
        step=50,
    )
    if st.button("Analyze issues", type="primary") and jql.strip():
        reporter = ProgressReporter(f"Analyzing issues for: {jql}")
        try:
            summary = service.analyze_jql(jql, max_issues=int(max_issues), progress=reporter.callback)
        except RuntimeError as exc:
            logger.error("Continuity overview failed for %r: %s", jql, exc)
            reporter.error(f"Failed to analyze issues: {exc}")
            return
        st.session_state["overview_jql"] = jql
        st.session_state["overview_df"] = summary
        reporter.complete(f"Analyzed {len(summary)} issue(s).")

    summary = st.session_state.get("overview_df", pd.DataFrame())
    if summary.empty:
        st.info("No issues analyzed yet.")
        return

    c1, c2, c3 = st.columns(3)
    c1.metric("Issues", len(summary))
    c2.metric("Median flow efficiency", f"{summary['flow_efficiency'].median():.1f}%")
    c3.metric("Median momentum", f"{summary['momentum_score'].median():.0f}/10")

    chart = momentum_distribution_chart(summary)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    render_table(summary, server=st.session_state.get("jira_server"))
    csv = summary.to_csv(index=False).encode(SETTINGS.download_encoding)
    st.download_button("Download CSV", data=csv, file_name="jira_continuity.csv", mime="text/csv")
