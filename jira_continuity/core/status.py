"""Status classification utilities.

A status counts as *active work* when its name contains an active keyword and
no blocking keyword. Matching is a lowercase substring test, so
"In Progress but Blocked" is inactive.
"""

from __future__ import annotations

from .config import DEFAULT_CONFIG, ContinuityConfig


def is_active_status(name: str | None, config: ContinuityConfig = DEFAULT_CONFIG) -> bool:
    """Return True if ``name`` denotes active work.

    Parameters
    ----------
    name : str | None
        Raw status name from Jira.
    config : ContinuityConfig
        Supplies the active and inactive keyword lists.

    Returns
    -------
    bool
        False for empty names and for any name containing an inactive keyword.

    Examples
    --------
    >>> is_active_status("In Progress")
    True
    >>> is_active_status("In Progress but Blocked")
    False
    """
    if not name:
        return False
    text = name.lower()
    if not any(k in text for k in config.active_keywords):
        return False
    return not any(k in text for k in config.inactive_keywords)


def is_active_development(name: str | None, config: ContinuityConfig = DEFAULT_CONFIG) -> bool:
    if not name:
        return False
    text = name.lower()
    return any(k in text for k in config.active_development_keywords)


def clean_status_name(value: str | None) -> str:
    """Sanitize status string, converting null-like values to "Unknown"."""
    if not value:
        return "Unknown"
    text = str(value).strip()
    if not text:
        return "Unknown"
    if text.lower() in {"nan", "none", "null"}:
        return "Unknown"
    return text
