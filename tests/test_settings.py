"""
tests/test_settings.py
======================

Unit tests for ringside.settings
"""

import logging

import pytest
from pydantic import ValidationError

from ringside.settings import LOG_FORMAT, Settings, configure_logging


def test_defaults():
    s = Settings()
    assert s.stable_min_members == 3
    assert s.tag_team_member_weight == 2
    assert s.release_notice_days == 0


def test_environment_override(monkeypatch):
    """RINGSIDE_* environment variables override the defaults."""
    monkeypatch.setenv("RINGSIDE_STABLE_MIN_MEMBERS", "5")
    monkeypatch.setenv("RINGSIDE_RELEASE_NOTICE_DAYS", "14")
    s = Settings()
    assert s.stable_min_members == 5
    assert s.release_notice_days == 14


def test_rejects_nonsense():
    with pytest.raises(ValidationError):
        Settings(tag_team_member_weight=0)


def test_configure_logging(monkeypatch):
    """configure_logging hands the configured level to logging.basicConfig."""
    seen = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: seen.update(kwargs))
    configure_logging("debug")
    assert seen == {"level": "DEBUG", "format": LOG_FORMAT}
