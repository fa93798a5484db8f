"""
tests/test_titles.py
====================

Unit tests for titles: activation, retirement and vacating the current
championship.
"""

from datetime import datetime

import pytest

from ringside.builders import title, wrestler
from ringside.changes import PeriodOp, apply_to
from ringside.lifecycle import activate, deactivate, debut, employ, injure, retire
from ringside.models import UnsupportedCapability
from ringside.periods import PeriodKind
from ringside.rejections import Reason
from ringside.status import current_champion, is_champion, is_retired

T0 = datetime(2020, 1, 1)
T1 = datetime(2021, 1, 1)
NOW = datetime(2024, 6, 1)

IC = "title:intercontinental"
GUNTHER = "wrestler:gunther"


def _reign():
    belt = title("Intercontinental").active(T0).held_by(GUNTHER, since=T1).build()
    champ = wrestler("Gunther").employed(T0).champion_of("Intercontinental", since=T1).build()
    return belt, champ


def test_titles_have_no_member_minimum():
    assert debut(title("Intercontinental").build(), NOW).ok


def test_title_activate_and_deactivate():
    assert activate(title("Intercontinental").inactive(T0, T1).build(), NOW).ok
    assert deactivate(title("Intercontinental").active(T0).build(), NOW).ok


def test_current_champion():
    belt, champ = _reign()
    assert current_champion(belt, NOW).champion == GUNTHER
    assert is_champion(champ, NOW)
    assert not is_champion(belt, NOW)


def test_retire_title_vacates_it():
    """Retiring a title closes the reign on both the title and the champion."""
    belt, champ = _reign()
    change = retire(belt, NOW).unwrap()
    assert PeriodOp.closing(IC, PeriodKind.CHAMPIONSHIP, NOW) in change.ops
    assert PeriodOp.closing(GUNTHER, PeriodKind.CHAMPIONSHIP, NOW, ref="Intercontinental") in change.ops

    assert is_retired(apply_to(belt, change), NOW)
    assert current_champion(apply_to(belt, change), NOW) is None
    assert not is_champion(apply_to(champ, change), NOW)


def test_retire_unactivated_title():
    assert retire(title("Intercontinental").build(), NOW).reason == Reason.UNACTIVATED


def test_champion_cannot_retire():
    _, champ = _reign()
    assert retire(champ, NOW).reason == Reason.ACTIVE_CHAMPION


def test_titles_are_not_employed_or_injured():
    belt = title("Intercontinental").active(T0).build()
    with pytest.raises(UnsupportedCapability):
        employ(belt, NOW)
    with pytest.raises(UnsupportedCapability):
        injure(belt, NOW)
