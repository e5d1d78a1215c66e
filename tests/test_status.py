from jira_continuity.core.config import ContinuityConfig
from jira_continuity.core.status import clean_status_name, is_active_development, is_active_status


def test_active_status_examples():
    assert is_active_status("In Progress")
    assert is_active_status("Developing")
    assert is_active_status("CODING")
    assert not is_active_status("In Progress but Blocked")
    assert not is_active_status("Blocked")
    assert not is_active_status("In Review")
    assert not is_active_status("To Do")
    assert not is_active_status(None)
    assert not is_active_status("")


def test_substring_match_not_whole_word():
    # "inactive" contains "active"; no blocking keyword, so it counts
    assert is_active_status("Inactive")
    # "QA in progress" contains "qa"
    assert not is_active_status("QA in progress")


def test_custom_keywords():
    config = ContinuityConfig(active_keywords=("doing",), inactive_keywords=())
    assert is_active_status("Doing", config)
    assert not is_active_status("In Progress", config)


def test_active_development():
    assert is_active_development("In Progress")
    assert is_active_development("developing")
    assert not is_active_development("Coding")
    assert not is_active_development(None)


def test_clean_status_name():
    assert clean_status_name(None) == "Unknown"
    assert clean_status_name("  ") == "Unknown"
    assert clean_status_name("null") == "Unknown"
    assert clean_status_name(" Done ") == "Done"
