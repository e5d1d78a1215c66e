"""Issue continuity page.

Analyzes a single issue, either fetched by key through the connected
IssueService or uploaded as raw Jira JSON (``expand=changelog``).
"""

from __future__ import annotations

import json
import logging

import streamlit as st

from jira_continuity.analytics.aggregations.continuity import (
    context_switch_frame,
    gaps_frame,
    late_changes_frame,
    periods_frame,
)
from jira_continuity.app import register_page
from jira_continuity.core.config_loader import load_continuity_config
from jira_continuity.core.models import ContinuityAnalysisResult
from jira_continuity.core.service import IssueService
from jira_continuity.visual.charts import activity_timeline_chart
from jira_continuity.visual.tables import render_table

logger = logging.getLogger(__name__)


def _analyze_upload(upload) -> ContinuityAnalysisResult | None:
    try:
        payload = json.loads(upload.getvalue().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.error("Uploaded file %s is not valid JSON: %s", upload.name, exc)
        st.error(f"Could not read {upload.name}: {exc}")
        return None
    if not isinstance(payload, dict) or "fields" not in payload:
        st.error("Expected a Jira issue object with a 'fields' section.")
        return None
    service = st.session_state.get("issue_service")
    if service is None:
        service = IssueService(api=None, config=load_continuity_config())
    return service.analyze_raw(payload, payload.get("comments"))


def _render_result(key: str, result: ContinuityAnalysisResult) -> None:
    st.subheader(key)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Flow efficiency", f"{result.flow_efficiency:.1f}%")
    c2.metric("Momentum", f"{result.momentum_score}/10")
    c3.metric("Fragmentation", result.work_fragmentation.fragmentation_score)
    c4.metric("Feedback response", f"{result.feedback_response_time:.1f} h")
    st.caption(
        f"Longest stagnation: {result.longest_stagnation_period} business days · "
        f"Hand-offs: {result.context_switches.count} ({result.context_switches.impact})"
    )

    periods = periods_frame(result)
    chart = activity_timeline_chart(periods)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    tabs = st.tabs(["Periods", "Communication gaps", "Hand-offs", "Late changes", "JSON"])
    with tabs[0]:
        render_table(periods)
    with tabs[1]:
        render_table(gaps_frame(result))
    with tabs[2]:
        render_table(context_switch_frame(result))
    with tabs[3]:
        render_table(late_changes_frame(result))
    with tabs[4]:
        st.json(result.to_dict())
        st.download_button(
            "Download JSON",
            data=json.dumps(result.to_dict(), indent=2).encode("utf-8"),
            file_name=f"continuity_{key or 'issue'}.json",
            mime="application/json",
        )


@register_page("Issue Continuity")
def issue_continuity_page():
    st.title("Issue Continuity")
    st.caption("Flow efficiency, stagnation, hand-offs and momentum for a single issue.")
    service: IssueService | None = st.session_state.get("issue_service")

    source = st.radio("Source", ["Jira issue key", "Upload JSON"], horizontal=True)
    if source == "Jira issue key":
        if service is None:
            st.warning("Initialize connection on Setup page first.")
            return
        issue_key = st.text_input("Issue key", value=st.session_state.get("continuity_key", "")).strip().upper()
        if st.button("Analyze", type="primary") and issue_key:
            with st.spinner(f"Analyzing {issue_key}"):
                try:
                    result = service.analyze_issue(issue_key)
                except RuntimeError as exc:
                    logger.error("Continuity analysis failed for %s: %s", issue_key, exc)
                    st.error(str(exc))
                    return
            st.session_state["continuity_key"] = issue_key
            st.session_state["continuity_result"] = (issue_key, result)
    else:
        upload = st.file_uploader("Issue JSON", type=["json"])
        if upload is not None and st.button("Analyze upload", type="primary"):
            result = _analyze_upload(upload)
            if result is None:
                return
            st.session_state["continuity_result"] = (upload.name.rsplit(".", 1)[0], result)

    cached = st.session_state.get("continuity_result")
    if cached is None:
        st.info("No issue analyzed yet.")
        return
    _render_result(*cached)
