"""
tests/test_models.py
====================

Unit tests for the entity snapshots and enums defined in ringside.models.

Run:  pytest -q
"""

from dataclasses import FrozenInstanceError

import pytest

from ringside.models import (
    EmploymentStatus,
    Manager,
    RosterMemberType,
    Stable,
    TagTeam,
    Title,
    UnsupportedCapability,
    Wrestler,
    key_type,
    slugify,
)
from ringside.periods import PeriodKind


def test_key_and_slug():
    """Keys are '<type>:<slug>' with a lower-cased, dash-separated slug."""
    assert Wrestler("John Cena").key == "wrestler:john-cena"
    assert TagTeam("The Usos").key == "tag_team:the-usos"
    assert Stable("The  Bloodline").slug == "the-bloodline"
    assert slugify("Jey Uso") == "jey-uso"


def test_key_type_round_trip():
    assert key_type(Manager("Paul Heyman").key) is RosterMemberType.MANAGER


def test_title_has_no_employment():
    """Asking a title for employments is a programming error."""
    with pytest.raises(UnsupportedCapability):
        Title("Intercontinental").periods(PeriodKind.EMPLOYMENT)


def test_unsupported_capability_is_a_type_error():
    assert issubclass(UnsupportedCapability, TypeError)


def test_tag_team_cannot_be_injured():
    team = TagTeam("The Usos")
    assert not team.supports(PeriodKind.INJURY)
    assert team.supports(PeriodKind.SUSPENSION)
    assert team.supports(PeriodKind.MEMBER)


def test_managers_are_not_stable_members():
    with pytest.raises(UnsupportedCapability):
        Stable("The Bloodline").member_field("manager:paul-heyman")
    assert Stable("The Bloodline").member_field("tag_team:the-usos") == "tag_teams"


def test_snapshots_are_frozen():
    jey = Wrestler("Jey Uso")
    with pytest.raises(FrozenInstanceError):
        jey.name = "Main Event Jey Uso"


def test_str_on_status():
    """Enum __str__ returns its name (nicer REPL)."""
    assert str(EmploymentStatus.EMPLOYED) == "EMPLOYED"


def test_member_type_label():
    assert RosterMemberType.TAG_TEAM.label == "tag team"
    assert Wrestler("Jey Uso").label == "wrestler"
