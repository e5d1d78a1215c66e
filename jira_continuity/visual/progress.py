"""Progress banner for long-running analyses in Streamlit pages."""

from __future__ import annotations

import logging

import streamlit as st

logger = logging.getLogger(__name__)


class ProgressReporter:
    """Banner + progress bar; ``callback`` matches IssueService progress callbacks."""

    def __init__(self, title: str):
        self._container = st.container()
        self._container.info(title)
        self._message = self._container.empty()
        self._bar = self._container.progress(0.0)
        self._total: int | None = None
        self._current = 0
        self._done = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        if self._done:
            return
        if total is not None and total > 0:
            self._total = total
        if current is not None:
            self._current = max(0, current)
        logger.debug("progress: %s (%s/%s)", message, self._current, self._total)
        if self._total:
            self._message.write(f"{message} ({self._current}/{self._total})")
            self._bar.progress(min(self._current / self._total, 1.0))
        else:
            self._message.write(message)
            self._bar.progress(0.0)

    def complete(self, message: str) -> None:
        if self._done:
            return
        self._bar.progress(1.0)
        self._container.success(message)
        self._done = True

    def error(self, message: str) -> None:
        if self._done:
            return
        self._container.error(message)
        self._done = True
