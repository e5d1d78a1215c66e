"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``jira_continuity/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st
from jira import JIRAError

from jira_continuity.app import main
from jira_continuity.core.config_loader import load_continuity_config

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("jira_continuity")

st.set_page_config(layout="wide")

PAGES_DIR = Path(__file__).parent / "jira_continuity" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    import_module(f"jira_continuity.pages.{py.stem}")


def _auto_init_issue_service():
    """Initialize Jira service from Streamlit secrets if available."""
    if "issue_service" in st.session_state:
        return
    from jira_continuity.core.jira_client import JiraAPI
    from jira_continuity.core.service import IssueService
    from jira_continuity.pages.setup import read_jira_secrets

    server, email, token = read_jira_secrets()
    if not (server and email and token):
        st.sidebar.warning("Jira secrets not found. Please use the Setup page.")
        return
    try:
        api = JiraAPI(server, email, token)
    except (JIRAError, RuntimeError, ValueError) as exc:
        logger.error("Jira connection from secrets failed: %s", exc)
        st.sidebar.error(f"Jira connection failed: {exc}")
        return
    st.session_state["jira_server"] = server
    st.session_state["issue_service"] = IssueService(api, load_continuity_config())
    st.sidebar.success("Jira connection successful!")


_auto_init_issue_service()

if __name__ == "__main__":
    main()
