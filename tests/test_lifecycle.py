"""
tests/test_lifecycle.py
=======================

Unit tests for the single-person guards in ringside.lifecycle
(wrestlers, managers and referees).
"""

import logging
from datetime import datetime, timedelta

import pytest

from ringside.builders import manager, referee, stable, tag_team, wrestler
from ringside.changes import Op, PeriodOp, apply_to
from ringside.lifecycle import (
    RULES,
    can,
    change_employment_date,
    clear_injury,
    delete,
    employ,
    handle,
    heal,
    injure,
    reinstate,
    release,
    restore,
    retire,
    suspend,
    unretire,
)
from ringside.models import UnsupportedCapability
from ringside.periods import Period, PeriodKind
from ringside.rejections import Action, Reason
from ringside.status import current_wrestlers, is_employed, is_injured, is_retired, is_suspended

T0 = datetime(2020, 1, 1)
T1 = datetime(2021, 1, 1)
T2 = datetime(2022, 1, 1)
NOW = datetime(2024, 6, 1)
LATER = datetime(2030, 1, 1)


def _jey():
    return wrestler("Jey Uso").employed(T0)


# ---------------------------------------------------------------------
# Employment
# ---------------------------------------------------------------------
def test_employ_unemployed_wrestler():
    """A brand-new wrestler gets one employment opened at the effective date."""
    outcome = employ(wrestler("Jey Uso").build(), T1)
    assert outcome.ok
    assert outcome.change.ops == (PeriodOp.opening("wrestler:jey-uso", PeriodKind.EMPLOYMENT, T1),)
    assert outcome.change.subject == "wrestler:jey-uso"


@pytest.mark.parametrize(
    "builder, reason",
    [
        (wrestler("Jey Uso").employed(T0), Reason.EMPLOYED),
        (wrestler("Jey Uso").employed(T0).retired(T1), Reason.RETIRED),
        (wrestler("Jey Uso").future_employed(LATER), Reason.FUTURE_EMPLOYMENT),
        (wrestler("Jey Uso").employed(T0).deleted(T1), Reason.ENTITY_DELETED),
    ],
)
def test_employ_rejections(builder, reason):
    outcome = employ(builder.build(), NOW)
    assert outcome.rejected
    assert outcome.reason == reason
    assert outcome.rejection.family == "CannotBeEmployed"


def test_rehire_released_wrestler():
    assert employ(wrestler("Jey Uso").released(T0, T1).build(), NOW).ok


def test_employ_then_release_round_trip():
    """employ at T1 then release at T2 leaves exactly one closed employment."""
    jey = wrestler("Jey Uso").build()
    jey = apply_to(jey, employ(jey, T1).unwrap())
    jey = apply_to(jey, release(jey, T2).unwrap())
    assert jey.employments == (Period(T1, T2),)
    assert not is_employed(jey, NOW)


@pytest.mark.parametrize(
    "builder, reason",
    [
        (wrestler("Jey Uso"), Reason.UNEMPLOYED),
        (wrestler("Jey Uso").released(T0, T1), Reason.RELEASED),
        (wrestler("Jey Uso").future_employed(LATER), Reason.FUTURE_EMPLOYMENT),
        (wrestler("Jey Uso").employed(T0).retired(T1), Reason.RETIRED),
    ],
)
def test_release_requires_employment(builder, reason):
    assert release(builder.build(), NOW).reason == reason


def test_release_closes_injury_and_employment():
    jey = _jey().injured(T1).build()
    change = release(jey, NOW).unwrap()
    assert change.closed(PeriodKind.INJURY) == ["wrestler:jey-uso"]
    assert change.closed(PeriodKind.EMPLOYMENT) == ["wrestler:jey-uso"]
    released = apply_to(jey, change)
    assert not is_injured(released, NOW)


def test_release_refused_for_champion():
    gunther = wrestler("Gunther").employed(T0).champion_of("Intercontinental", since=T1).build()
    outcome = release(gunther, NOW)
    assert outcome.reason == Reason.ACTIVE_CHAMPION
    assert outcome.rejection.context["titles"] == ["Intercontinental"]
    assert outcome.rejection.message == (
        "This wrestler 'Gunther' is the current Intercontinental champion and cannot be released."
    )


def test_release_notice_period():
    """With notice required, release waits until it has been served."""
    jey = _jey().build()
    outcome = release(jey, NOW, notice_days=14)
    assert outcome.reason == Reason.NOTICE_PERIOD
    assert outcome.rejection.context["notice_days"] == 14

    short = _jey().restricted(notice_given_at=NOW - timedelta(days=3)).build()
    assert release(short, NOW, notice_days=14).rejected
    served = _jey().restricted(notice_given_at=NOW - timedelta(days=20)).build()
    assert release(served, NOW, notice_days=14).ok


def test_change_employment_date():
    """Only a not-yet-employed entity can move its employment start."""
    assert change_employment_date(_jey().build(), T1, NOW).reason == Reason.CURRENTLY_EMPLOYED

    same_day = change_employment_date(_jey().build(), datetime(2020, 1, 1, 18, 0), NOW)
    assert same_day.ok
    assert same_day.change.ops == ()

    pending = wrestler("Jey Uso").future_employed(LATER).build()
    moved = change_employment_date(pending, datetime(2031, 1, 1), NOW).unwrap()
    assert moved.ops[0].op is Op.RESCHEDULE
    assert apply_to(pending, moved).employments == (Period(datetime(2031, 1, 1)),)

    fresh = change_employment_date(wrestler("Solo Sikoa").build(), LATER, NOW).unwrap()
    assert fresh.opened(PeriodKind.EMPLOYMENT) == ["wrestler:solo-sikoa"]


# ---------------------------------------------------------------------
# Suspension
# ---------------------------------------------------------------------
def test_suspend_employed_wrestler():
    outcome = suspend(_jey().build(), NOW)
    assert outcome.change.opened(PeriodKind.SUSPENSION) == ["wrestler:jey-uso"]


@pytest.mark.parametrize(
    "builder, reason",
    [
        (wrestler("Jey Uso"), Reason.UNEMPLOYED),
        (wrestler("Jey Uso").released(T0, T1), Reason.RELEASED),
        (wrestler("Jey Uso").employed(T0).retired(T1), Reason.RETIRED),
        (wrestler("Jey Uso").employed(T0).suspended(T1), Reason.SUSPENDED),
        (wrestler("Jey Uso").employed(T0).injured(T1), Reason.INJURED),
    ],
)
def test_suspend_rejections(builder, reason):
    assert suspend(builder.build(), NOW).reason == reason


def test_reinstate_suspended_wrestler():
    jey = _jey().suspended(T1).build()
    change = reinstate(jey, NOW).unwrap()
    assert change.closed(PeriodKind.SUSPENSION) == ["wrestler:jey-uso"]
    assert not is_suspended(apply_to(jey, change), NOW)


def test_reinstate_not_suspended():
    """Managers and referees are 'available', wrestlers 'bookable'."""
    assert reinstate(_jey().build(), NOW).reason == Reason.BOOKABLE
    assert reinstate(manager("Paul Heyman").employed(T0).build(), NOW).reason == Reason.AVAILABLE
    assert reinstate(referee("Charles Robinson").employed(T0).build(), NOW).reason == Reason.AVAILABLE
    assert reinstate(_jey().injured(T1).build(), NOW).reason == Reason.INJURED


def test_reinstate_waits_for_disciplinary_review():
    jey = _jey().suspended(T1).restricted(disciplinary_review_pending=True).build()
    assert reinstate(jey, NOW).reason == Reason.DISCIPLINARY_REVIEW


# ---------------------------------------------------------------------
# Injury
# ---------------------------------------------------------------------
def test_injure_and_heal():
    jey = _jey().build()
    hurt = apply_to(jey, injure(jey, T1).unwrap())
    assert is_injured(hurt, NOW)
    healed = apply_to(hurt, heal(hurt, T2).unwrap())
    assert not is_injured(healed, NOW)
    assert healed.injuries == (Period(T1, T2),)


@pytest.mark.parametrize(
    "builder, reason",
    [
        (wrestler("Jey Uso"), Reason.UNEMPLOYED),
        (wrestler("Jey Uso").released(T0, T1), Reason.RELEASED),
        (wrestler("Jey Uso").employed(T0).injured(T1), Reason.INJURED),
        (wrestler("Jey Uso").employed(T0).suspended(T1), Reason.SUSPENDED),
    ],
)
def test_injure_rejections(builder, reason):
    assert injure(builder.build(), NOW).reason == reason


def test_clear_injury_rejections():
    assert clear_injury(_jey().build(), NOW).reason == Reason.NOT_INJURED
    pending = _jey().injured(T1).restricted(medical_clearance_pending=True).build()
    assert clear_injury(pending, NOW).reason == Reason.MEDICAL_CLEARANCE_MISSING
    treating = _jey().injured(T1).restricted(in_treatment=True).build()
    assert clear_injury(treating, NOW).reason == Reason.ONGOING_TREATMENT


def test_injure_tag_team_is_a_programming_error():
    """Tag teams have no injuries of their own."""
    with pytest.raises(UnsupportedCapability):
        injure(tag_team("The Usos").employed(T0).build(), NOW)


def test_stable_cannot_be_employed():
    with pytest.raises(UnsupportedCapability):
        employ(stable("The Bloodline").build(), NOW)


# ---------------------------------------------------------------------
# Retirement
# ---------------------------------------------------------------------
def test_retire_employed_wrestler():
    jey = _jey().injured(T1).build()
    change = retire(jey, NOW).unwrap()
    assert change.closed(PeriodKind.INJURY) == ["wrestler:jey-uso"]
    assert change.closed(PeriodKind.EMPLOYMENT) == ["wrestler:jey-uso"]
    assert change.opened(PeriodKind.RETIREMENT) == ["wrestler:jey-uso"]
    assert is_retired(apply_to(jey, change), NOW)


def test_released_wrestler_can_retire():
    outcome = retire(wrestler("Jey Uso").released(T0, T1).build(), NOW)
    assert outcome.ok
    assert outcome.change.closed(PeriodKind.EMPLOYMENT) == []


@pytest.mark.parametrize(
    "builder, reason",
    [
        (wrestler("Jey Uso"), Reason.UNEMPLOYED),
        (wrestler("Jey Uso").future_employed(LATER), Reason.FUTURE_EMPLOYMENT),
        (wrestler("Jey Uso").employed(T0).retired(T1), Reason.RETIRED),
        (wrestler("Jey Uso").employed(T0).champion_of("Intercontinental"), Reason.ACTIVE_CHAMPION),
    ],
)
def test_retire_rejections(builder, reason):
    assert retire(builder.build(), NOW).reason == reason


def test_retire_leaves_groups_and_managers():
    """Retiring a wrestler ends its stable membership on both sides and its managements."""
    heyman = manager("Paul Heyman").employed(T0)
    s = stable("The Bloodline").active(T0).with_wrestlers(
        wrestler("Roman Reigns").employed(T0).managed_by(heyman)
    ).build()
    roman = current_wrestlers(s, NOW)[0]
    change = retire(roman, NOW).unwrap()

    assert PeriodOp.closing("stable:the-bloodline", PeriodKind.MEMBER, NOW, ref="wrestler:roman-reigns") in change.ops
    assert PeriodOp.closing("wrestler:roman-reigns", PeriodKind.MEMBERSHIP, NOW, ref="stable:the-bloodline") in change.ops
    assert PeriodOp.closing("wrestler:roman-reigns", PeriodKind.MANAGEMENT, NOW, ref="manager:paul-heyman") in change.ops

    after = apply_to(s, change)
    assert current_wrestlers(after, NOW) == []


def test_unretire():
    jey = _jey().retired(T1).build()
    change = unretire(jey, NOW).unwrap()
    assert change.closed(PeriodKind.RETIREMENT) == ["wrestler:jey-uso"]
    assert change.opened(PeriodKind.EMPLOYMENT) == ["wrestler:jey-uso"]
    back = apply_to(jey, change)
    assert is_employed(back, NOW)
    assert not is_retired(back, NOW)


def test_unretire_rejections():
    assert unretire(_jey().build(), NOW).reason == Reason.NOT_RETIRED
    assert unretire(_jey().retired(T1).restricted(permanently_retired=True).build(), NOW).reason == Reason.PERMANENTLY_RETIRED

    outcome = unretire(_jey().retired(T1).restricted(medical_restriction="neck").build(), NOW)
    assert outcome.reason == Reason.MEDICAL_RESTRICTION
    assert "(neck)" in outcome.rejection.message

    bound = _jey().retired(T1).restricted(contractual_obligation="non-compete").build()
    assert unretire(bound, NOW).reason == Reason.CONTRACTUAL_LIMITATION


# ---------------------------------------------------------------------
# Soft delete
# ---------------------------------------------------------------------
def test_delete_and_restore():
    jey = _jey().build()
    gone = apply_to(jey, delete(jey, NOW).unwrap())
    assert gone.is_deleted
    assert delete(gone, NOW).reason == Reason.ENTITY_DELETED
    back = apply_to(gone, restore(gone, NOW).unwrap())
    assert not back.is_deleted


def test_restore_rejections():
    assert restore(_jey().build(), NOW).reason == Reason.NOT_DELETED
    gone = _jey().deleted(T1).build()
    outcome = restore(gone, NOW, taken_names=["JEY  uso"])
    assert outcome.reason == Reason.REPLACEMENT_EXISTS
    assert outcome.rejection.context["replacement"] == "JEY  uso"
    assert restore(gone, NOW, taken_names=["Jimmy Uso"]).ok


@pytest.mark.parametrize("guard", [employ, release, suspend, reinstate, injure, clear_injury, retire, unretire])
def test_deleted_entity_is_refused_first(guard):
    """Soft-deleted entities are refused before any other check."""
    gone = _jey().injured(T1).deleted(T2).build()
    assert guard(gone, NOW).reason == Reason.ENTITY_DELETED


# ---------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------
def test_rules_cover_every_action():
    assert set(RULES) == set(Action)


def test_handle_by_name():
    jey = _jey().injured(T1).build()
    assert handle(jey, "heal", NOW).ok
    assert handle(jey, Action.SUSPEND, NOW).reason == Reason.INJURED
    assert can(jey, "clear-injury", NOW)
    assert not can(jey, "injure", NOW)


def test_handle_passes_options_through():
    assert handle(_jey().build(), "release", NOW, notice_days=30).reason == Reason.NOTICE_PERIOD


def test_handle_unknown_action():
    with pytest.raises(ValueError):
        handle(_jey().build(), "promote", NOW)


def test_guards_do_not_mutate():
    jey = _jey().build()
    before = jey
    suspend(jey, NOW)
    retire(jey, NOW)
    assert jey == before


def test_rejections_are_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="ringside.lifecycle"):
        suspend(wrestler("Jey Uso").build(), NOW)
    assert any("refused" in record.getMessage() for record in caplog.records)


# ---------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------
def test_employ_suspend_reinstate():
    """Suspension sits on top of an employment that stays open."""
    w = wrestler("Jey Uso").build()
    w = apply_to(w, employ(w, T0).unwrap())
    assert is_employed(w, T0)

    w = apply_to(w, suspend(w, T1).unwrap())
    assert is_suspended(w, T1)
    assert is_employed(w, T1)

    w = apply_to(w, reinstate(w, T2).unwrap())
    assert not is_suspended(w, NOW)
    assert is_employed(w, NOW)


@pytest.mark.parametrize("guard", [suspend, injure, employ])
def test_retirement_blocks(guard):
    """A retired wrestler cannot be suspended, injured or employed."""
    jey = _jey().retired(T1).build()
    assert guard(jey, NOW).reason == Reason.RETIRED


def test_retire_unemployed_wrestler():
    assert retire(wrestler("Jey Uso").build(), NOW).reason == Reason.UNEMPLOYED


def test_at_most_one_open_period_after_any_sequence():
    """Whatever is accepted, no period kind ever has two open periods."""
    w = wrestler("Jey Uso").build()
    steps = [(employ, T0), (injure, T1), (suspend, T1), (heal, T2), (suspend, T2),
             (reinstate, NOW), (retire, NOW), (unretire, LATER), (release, LATER)]
    for guard, at in steps:
        outcome = guard(w, at)
        if outcome.ok:
            w = apply_to(w, outcome.change)
        for field in ("employments", "suspensions", "injuries", "retirements"):
            assert sum(1 for p in getattr(w, field) if p.ended_at is None) <= 1
