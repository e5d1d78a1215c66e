"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import pandas as pd
import streamlit as st

from jira_continuity.core.config import SETTINGS

from .column_metadata import apply_column_metadata


def add_ticket_link(df: pd.DataFrame, server: str, key_col: str = "key", label: str = "Ticket"):
    if df.empty or key_col not in df.columns:
        return df, {}
    out = df.copy()
    base = server.rstrip("/")
    out[label] = out[key_col].astype(str).apply(lambda k: f"{base}/browse/{k}" if k and k != "nan" else "")
    cfg = {
        label: st.column_config.LinkColumn(
            label,
            display_text=r"browse/(.*)$",
            help="Open in Jira",
            width="medium",
        )
    }
    return out, cfg


def render_table(df: pd.DataFrame, *, server: str | None = None, limit: int | None = None) -> None:
    """Render ``df`` with labelled columns (and a Jira link column when ``server`` is set)."""
    if df.empty:
        st.caption("Nothing to show.")
        return
    table, cfg = add_ticket_link(df, server) if server else (df, {})
    cols = [c for c in table.columns if c != "key"] if "Ticket" in table.columns else list(table.columns)
    if "Ticket" in cols:
        cols.remove("Ticket")
        cols.insert(0, "Ticket")
    cfg = apply_column_metadata(cols, cfg)
    st.dataframe(
        table[cols].head(limit or SETTINGS.max_table_rows),
        hide_index=True,
        column_config=cfg,
        use_container_width=True,
    )
