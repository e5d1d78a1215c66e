"""Connection setup page: collect Jira credentials and initialize IssueService."""

from __future__ import annotations

import logging

import streamlit as st
from jira import JIRAError

from jira_continuity.app import register_page
from jira_continuity.core.config import JIRA_DEFAULT_SERVER
from jira_continuity.core.config_loader import clear_config_cache, load_continuity_config
from jira_continuity.core.jira_client import JiraAPI
from jira_continuity.core.service import IssueService

logger = logging.getLogger(__name__)


def read_jira_secrets() -> tuple[str | None, str | None, str | None]:
    jira_secrets = st.secrets.get("jira", {})
    server = jira_secrets.get("JIRA_SERVER") or st.secrets.get("JIRA_SERVER")
    email = jira_secrets.get("JIRA_EMAIL") or st.secrets.get("JIRA_EMAIL")
    token = (
        jira_secrets.get("JIRA_API_TOKEN")
        or st.secrets.get("JIRA_API_TOKEN")
        or jira_secrets.get("JIRA_TOKEN")
        or st.secrets.get("JIRA_TOKEN")
    )
    return server, email, token


@register_page("Setup / Connection")
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use secrets manager in production).")

    secret_server, secret_email, secret_token = read_jira_secrets()
    server = st.text_input(
        "Jira Server URL",
        value=st.session_state.get("jira_server") or secret_server or "",
        placeholder=JIRA_DEFAULT_SERVER,
    )
    email = st.text_input("Email / Username", value=st.session_state.get("jira_email") or secret_email or "")
    token = st.text_input("API Token", type="password", value=secret_token or "")
    ttl = st.number_input("Client cache TTL (seconds)", min_value=60, max_value=3600, value=300)

    if st.button("Initialize Connection", type="primary"):
        if not (server and email and token):
            st.error("All fields required.")
            return
        try:
            api = JiraAPI(server, email, token)
        except (JIRAError, RuntimeError, ValueError) as exc:
            logger.error("Failed to initialize Jira client for %s: %s", server, exc)
            st.error(f"Failed to initialize Jira client: {exc}")
            return
        api._cache_ttl = float(ttl)
        st.session_state["jira_server"] = server
        st.session_state["jira_email"] = email
        st.session_state["issue_service"] = IssueService(api, load_continuity_config())
        st.success("Connection initialized.")

    if "issue_service" in st.session_state:
        st.info("IssueService ready.")

    with st.expander("Analysis settings"):
        config = load_continuity_config()
        st.write(
            {
                "stagnation_threshold_days": config.stagnation_threshold_days,
                "communication_gap_threshold_days": config.communication_gap_threshold_days,
                "late_stage_threshold": config.late_stage_threshold,
                "business_hours_only": config.business_hours_only,
                "momentum_weights": config.momentum_weights,
            }
        )
        st.caption("Override these in continuity.yaml next to the package.")
        if st.button("Reload continuity.yaml"):
            clear_config_cache()
            reloaded = load_continuity_config()
            service = st.session_state.get("issue_service")
            if service is not None:
                service.config = reloaded
            st.success("Settings reloaded.")
