"""
ringside.lifecycle
==================

Transition guards for roster entities.

Each guard has the shape ``guard(entity, at=None, **options) -> Outcome``.
It first checks the entity is not soft-deleted, then walks an ordered
chain of preconditions; the first one that fails decides the
:class:`~ringside.rejections.Rejection`.  When every check passes the
guard returns the :class:`~ringside.changes.PeriodChange` to persist.
Nothing is ever mutated here.

Tag teams and stables resolve their members too: suspending a tag team
re-runs the wrestler suspension guard for each current wrestler and names
the first one that fails.

:data:`RULES` maps each :class:`~ringside.rejections.Action` to its guard,
and :func:`handle` dispatches through it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from .changes import Outcome, PeriodChange, PeriodOp, leave_group_ops
from .composite import (
    add_members,
    change_debut_date,
    member_count,
    remove_members,
    require_stable,
    split_stable,
)
from .models import RosterMemberType, UnsupportedCapability, slugify
from .periods import PeriodKind
from .rejections import Action, Reason, Rejection
from .settings import settings
from .status import (
    current_championships,
    current_champion,
    current_employment,
    current_groups,
    current_managers,
    current_period,
    current_members,
    current_wrestlers,
    future_employment,
    has_activity_periods,
    has_future_activation,
    has_future_employment,
    is_active,
    is_champion,
    is_employed,
    is_inactive,
    is_injured,
    is_released,
    is_retired,
    is_suspended,
    moment,
)

logger = logging.getLogger(__name__)

# Period kind an entity must support for an action to apply to it.
_NEEDS = {
    Action.EMPLOY: PeriodKind.EMPLOYMENT,
    Action.RELEASE: PeriodKind.EMPLOYMENT,
    Action.UPDATE_EMPLOYMENT: PeriodKind.EMPLOYMENT,
    Action.SUSPEND: PeriodKind.SUSPENSION,
    Action.REINSTATE: PeriodKind.SUSPENSION,
    Action.INJURE: PeriodKind.INJURY,
    Action.CLEAR_INJURY: PeriodKind.INJURY,
    Action.RETIRE: PeriodKind.RETIREMENT,
    Action.UNRETIRE: PeriodKind.RETIREMENT,
    Action.ACTIVATE: PeriodKind.ACTIVITY,
    Action.DEBUT: PeriodKind.ACTIVITY,
    Action.DEACTIVATE: PeriodKind.ACTIVITY,
}


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------
def _require(entity, action: Action) -> None:
    kind = _NEEDS[action]
    if not entity.supports(kind):
        raise UnsupportedCapability(f"a {entity.label} cannot {action.verb}")


def _reject(action: Action, reason: str, entity, **context) -> Outcome:
    logger.debug(f"{action} refused for {entity.key}: {reason}")
    return Outcome.reject(Rejection.of(action, reason, entity, **context))


def _member_reject(action: Action, reason: str, entity, member, member_reason: Optional[str] = None, **extra) -> Outcome:
    return _reject(
        action,
        reason,
        entity,
        member=member.name,
        member_type=member.member_type.value,
        member_reason=member_reason or reason,
        **extra,
    )


def _accept(action: Action, entity, at: datetime, ops: Iterable[PeriodOp]) -> Outcome:
    unique: List[PeriodOp] = []
    for op in ops:
        if op not in unique:
            unique.append(op)
    logger.debug(f"{action} accepted for {entity.key} at {at.isoformat()} ({len(unique)} ops)")
    return Outcome.accept(PeriodChange(action, entity.key, at, tuple(unique)))


def _employment_failure(entity, at: datetime) -> Optional[str]:
    """Most specific reason *entity* is not employed, or ``None`` if it is."""
    if is_employed(entity, at):
        return None
    if is_retired(entity, at):
        return Reason.RETIRED
    if has_future_employment(entity, at):
        return Reason.FUTURE_EMPLOYMENT
    if is_released(entity, at):
        return Reason.RELEASED
    return Reason.UNEMPLOYED


def _titles(entity, at: datetime) -> List[str]:
    return [reign.title for reign in current_championships(entity, at)]


def _open(entity, kind: PeriodKind, at: datetime, ref=None, member=None) -> PeriodOp:
    return PeriodOp.opening(entity.key, kind, at, ref, member)


def _close(entity, kind: PeriodKind, at: datetime, ref=None) -> PeriodOp:
    return PeriodOp.closing(entity.key, kind, at, ref)


def _close_if_current(entity, kind: PeriodKind, at: datetime) -> List[PeriodOp]:
    return [_close(entity, kind, at)] if current_period(entity, kind, at) else []


def _retirement_ops(entity, at: datetime, keep: Optional[str] = None) -> List[PeriodOp]:
    """
    Ops retiring *entity* and everything hanging off it.  Membership in
    the group *keep* survives (wrestlers retired along with their tag team
    stay on it).
    """
    ops: List[PeriodOp] = []
    if entity.supports(PeriodKind.ACTIVITY):
        ops += _close_if_current(entity, PeriodKind.ACTIVITY, at)
    else:
        ops += _close_if_current(entity, PeriodKind.SUSPENSION, at)
        ops += _close_if_current(entity, PeriodKind.INJURY, at)
        ops += _close_if_current(entity, PeriodKind.EMPLOYMENT, at)
    ops.append(_open(entity, PeriodKind.RETIREMENT, at))

    for link in current_groups(entity, at):
        if link.key != keep:
            ops += leave_group_ops(entity.key, link.key, at)
    for manager in current_managers(entity, at):
        ops.append(_close(entity, PeriodKind.MANAGEMENT, at, ref=manager))

    if entity.member_type is RosterMemberType.TAG_TEAM:
        for wrestler in current_wrestlers(entity, at):
            ops += _retirement_ops(wrestler, at, keep=entity.key)
    elif entity.member_type is RosterMemberType.STABLE:
        for member in current_members(entity, at):
            ops += _retirement_ops(member, at)
    elif entity.member_type is RosterMemberType.TITLE:
        reign = current_champion(entity, at)
        if reign is not None:
            ops.append(_close(entity, PeriodKind.CHAMPIONSHIP, at))
            ops.append(PeriodOp.closing(reign.champion, PeriodKind.CHAMPIONSHIP, at, ref=entity.name))
    return ops


# ---------------------------------------------------------------------
# Employment
# ---------------------------------------------------------------------
def employ(entity, at: Optional[datetime] = None) -> Outcome:
    """
    Start employing *entity* at *at*.  A tag team also employs each
    current wrestler that is not employed yet.
    """
    action = Action.EMPLOY
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    if is_employed(entity, at):
        return _reject(action, Reason.EMPLOYED, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    if has_future_employment(entity, at):
        return _reject(action, Reason.FUTURE_EMPLOYMENT, entity)

    ops = [_open(entity, PeriodKind.EMPLOYMENT, at)]
    if entity.member_type is RosterMemberType.TAG_TEAM:
        for wrestler in current_wrestlers(entity, at):
            if is_retired(wrestler, at):
                return _member_reject(action, Reason.WRESTLER_NOT_ELIGIBLE, entity, wrestler, Reason.RETIRED)
            if is_employed(wrestler, at):
                continue
            if has_future_employment(wrestler, at):
                ops.append(PeriodOp.rescheduling(wrestler.key, PeriodKind.EMPLOYMENT, at))
            else:
                ops.append(_open(wrestler, PeriodKind.EMPLOYMENT, at))
    return _accept(action, entity, at, ops)


def release(entity, at: Optional[datetime] = None, notice_days: Optional[int] = None) -> Outcome:
    """
    End the current employment of *entity*.

    Parameters
    ----------
    notice_days : int | None
        Days of notice that must have been served before release; defaults
        to ``settings.release_notice_days``.  Notice is served from
        ``entity.restrictions.notice_given_at``.
    """
    action = Action.RELEASE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    failure = _employment_failure(entity, at)
    if failure:
        return _reject(action, failure, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    if is_champion(entity, at):
        return _reject(action, Reason.ACTIVE_CHAMPION, entity, titles=_titles(entity, at))
    days = settings.release_notice_days if notice_days is None else notice_days
    if days > 0:
        given = entity.restrictions.notice_given_at
        if given is None or given + timedelta(days=days) > at:
            return _reject(action, Reason.NOTICE_PERIOD, entity, notice_days=days)

    ops = _release_ops(entity, at)
    if entity.member_type is RosterMemberType.TAG_TEAM:
        for wrestler in current_wrestlers(entity, at):
            if is_employed(wrestler, at):
                ops += _release_ops(wrestler, at)
    return _accept(action, entity, at, ops)


def _release_ops(entity, at: datetime) -> List[PeriodOp]:
    return (
        _close_if_current(entity, PeriodKind.SUSPENSION, at)
        + _close_if_current(entity, PeriodKind.INJURY, at)
        + [_close(entity, PeriodKind.EMPLOYMENT, at)]
    )


def change_employment_date(entity, new_date: datetime, at: Optional[datetime] = None) -> Outcome:
    """
    Move the employment start of *entity* to *new_date*.

    Allowed while the entity is not yet employed (a future employment is
    rescheduled, otherwise one is opened) or when *new_date* falls on the
    day the current employment already started.
    """
    action = Action.UPDATE_EMPLOYMENT
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    current = current_employment(entity, at)
    if current is not None:
        if not current.started_on(new_date):
            return _reject(action, Reason.CURRENTLY_EMPLOYED, entity)
        return _accept(action, entity, at, [])
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)

    if future_employment(entity, at) is not None:
        ops = [PeriodOp.rescheduling(entity.key, PeriodKind.EMPLOYMENT, new_date)]
    else:
        ops = [_open(entity, PeriodKind.EMPLOYMENT, new_date)]
    return _accept(action, entity, at, ops)


# ---------------------------------------------------------------------
# Suspension
# ---------------------------------------------------------------------
def suspend(entity, at: Optional[datetime] = None) -> Outcome:
    """
    Suspend *entity*.  A tag team is suspended only when every current
    wrestler can be suspended as well; they are all suspended together.
    """
    action = Action.SUSPEND
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    failure = _employment_failure(entity, at)
    if failure:
        return _reject(action, failure, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    if is_suspended(entity, at):
        return _reject(action, Reason.SUSPENDED, entity)
    if is_injured(entity, at):
        return _reject(action, Reason.INJURED, entity)

    ops = [_open(entity, PeriodKind.SUSPENSION, at)]
    if entity.member_type is RosterMemberType.TAG_TEAM:
        wrestlers = current_wrestlers(entity, at)
        if not wrestlers:
            return _reject(action, Reason.NO_ACTIVE_WRESTLERS, entity)
        for wrestler in wrestlers:
            if is_suspended(wrestler, at):
                return _member_reject(action, Reason.WRESTLER_SUSPENDED, entity, wrestler, Reason.SUSPENDED)
            if is_injured(wrestler, at):
                return _member_reject(action, Reason.WRESTLER_INJURED, entity, wrestler, Reason.INJURED)
            outcome = suspend(wrestler, at)
            if outcome.rejected:
                return _member_reject(action, Reason.WRESTLER_NOT_ELIGIBLE, entity, wrestler, outcome.reason)
            ops.append(_open(wrestler, PeriodKind.SUSPENSION, at))
    return _accept(action, entity, at, ops)


def reinstate(entity, at: Optional[datetime] = None) -> Outcome:
    action = Action.REINSTATE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    failure = _employment_failure(entity, at)
    if failure:
        return _reject(action, failure, entity)
    if not is_suspended(entity, at):
        if is_injured(entity, at):
            return _reject(action, Reason.INJURED, entity)
        if entity.member_type in (RosterMemberType.MANAGER, RosterMemberType.REFEREE):
            return _reject(action, Reason.AVAILABLE, entity)
        return _reject(action, Reason.BOOKABLE, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    if entity.restrictions.disciplinary_review_pending:
        return _reject(action, Reason.DISCIPLINARY_REVIEW, entity)

    ops = [_close(entity, PeriodKind.SUSPENSION, at)]
    if entity.member_type is RosterMemberType.TAG_TEAM:
        for wrestler in current_wrestlers(entity, at):
            if is_suspended(wrestler, at):
                ops.append(_close(wrestler, PeriodKind.SUSPENSION, at))
    return _accept(action, entity, at, ops)


# ---------------------------------------------------------------------
# Injury
# ---------------------------------------------------------------------
def injure(entity, at: Optional[datetime] = None) -> Outcome:
    action = Action.INJURE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    failure = _employment_failure(entity, at)
    if failure:
        return _reject(action, failure, entity)
    if is_released(entity, at):
        return _reject(action, Reason.RELEASED, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    if is_injured(entity, at):
        return _reject(action, Reason.INJURED, entity)
    if is_suspended(entity, at):
        return _reject(action, Reason.SUSPENDED, entity)
    return _accept(action, entity, at, [_open(entity, PeriodKind.INJURY, at)])


def clear_injury(entity, at: Optional[datetime] = None) -> Outcome:
    """Heal *entity*: close its current injury."""
    action = Action.CLEAR_INJURY
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    if not is_injured(entity, at):
        return _reject(action, Reason.NOT_INJURED, entity)
    if entity.restrictions.medical_clearance_pending:
        return _reject(action, Reason.MEDICAL_CLEARANCE_MISSING, entity)
    if entity.restrictions.in_treatment:
        return _reject(action, Reason.ONGOING_TREATMENT, entity)
    return _accept(action, entity, at, [_close(entity, PeriodKind.INJURY, at)])


heal = clear_injury


# ---------------------------------------------------------------------
# Retirement
# ---------------------------------------------------------------------
def retire(entity, at: Optional[datetime] = None) -> Outcome:
    """
    Retire *entity*.

    Employed and released entities can retire; stables and titles need an
    activity history.  Retirement ends employment (or activity), group
    memberships and managements.  A tag team retires its wrestlers (who
    stay on the team), a stable retires every current member and a title
    vacates its current championship.
    """
    action = Action.RETIRE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)

    if entity.supports(PeriodKind.ACTIVITY):
        if not has_activity_periods(entity):
            return _reject(action, Reason.UNACTIVATED, entity)
        if has_future_activation(entity, at) and not is_active(entity, at):
            return _reject(action, Reason.FUTURE_ACTIVATION, entity)
        if is_retired(entity, at):
            return _reject(action, Reason.RETIRED, entity)
    else:
        if not (is_employed(entity, at) or is_released(entity, at) or is_retired(entity, at)):
            if has_future_employment(entity, at):
                return _reject(action, Reason.FUTURE_EMPLOYMENT, entity)
            return _reject(action, Reason.UNEMPLOYED, entity)
        if is_retired(entity, at):
            return _reject(action, Reason.RETIRED, entity)
        if is_champion(entity, at):
            return _reject(action, Reason.ACTIVE_CHAMPION, entity, titles=_titles(entity, at))

    if entity.member_type is RosterMemberType.TAG_TEAM:
        wrestlers = current_wrestlers(entity, at)
        if not wrestlers:
            return _reject(action, Reason.NO_ACTIVE_WRESTLERS, entity)
        for wrestler in wrestlers:
            if is_injured(wrestler, at):
                return _member_reject(action, Reason.WRESTLER_INJURED, entity, wrestler, Reason.INJURED)
            if is_suspended(wrestler, at):
                return _member_reject(action, Reason.WRESTLER_SUSPENDED, entity, wrestler, Reason.SUSPENDED)
            outcome = retire(wrestler, at)
            if outcome.rejected:
                return _member_reject(action, Reason.WRESTLER_NOT_ELIGIBLE, entity, wrestler, outcome.reason)
    elif entity.member_type is RosterMemberType.STABLE:
        for member in current_members(entity, at):
            if is_injured(member, at):
                return _member_reject(action, Reason.WRESTLER_INJURED, entity, member, Reason.INJURED)
            if is_suspended(member, at):
                return _member_reject(action, Reason.WRESTLER_SUSPENDED, entity, member, Reason.SUSPENDED)
            outcome = retire(member, at)
            if outcome.rejected:
                return _member_reject(action, Reason.MEMBER_NOT_ELIGIBLE, entity, member, outcome.reason)

    return _accept(action, entity, at, _retirement_ops(entity, at))


def unretire(entity, at: Optional[datetime] = None) -> Outcome:
    """
    Bring *entity* out of retirement, re-opening its employment (or
    activity).  A tag team brings back its retired wrestlers as well.
    """
    action = Action.UNRETIRE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    failure = _unretire_failure(entity, at)
    if failure:
        reason, context = failure
        return _reject(action, reason, entity, **context)

    ops = _unretire_ops(entity, at)
    if entity.member_type is RosterMemberType.TAG_TEAM:
        for wrestler in current_wrestlers(entity, at):
            if not is_retired(wrestler, at):
                continue
            failure = _unretire_failure(wrestler, at)
            if failure:
                return _member_reject(action, Reason.WRESTLER_NOT_ELIGIBLE, entity, wrestler, failure[0])
            ops += _unretire_ops(wrestler, at)
    return _accept(action, entity, at, ops)


def _unretire_failure(entity, at: datetime):
    restrictions = entity.restrictions
    if not is_retired(entity, at):
        return Reason.NOT_RETIRED, {}
    if restrictions.permanently_retired:
        return Reason.PERMANENTLY_RETIRED, {}
    if restrictions.medical_restriction:
        return Reason.MEDICAL_RESTRICTION, {"restriction": restrictions.medical_restriction}
    if restrictions.contractual_obligation:
        return Reason.CONTRACTUAL_LIMITATION, {"restriction": restrictions.contractual_obligation}
    return None


def _unretire_ops(entity, at: datetime) -> List[PeriodOp]:
    kind = PeriodKind.ACTIVITY if entity.supports(PeriodKind.ACTIVITY) else PeriodKind.EMPLOYMENT
    return [_close(entity, PeriodKind.RETIREMENT, at), _open(entity, kind, at)]


# ---------------------------------------------------------------------
# Activity (stables and titles)
# ---------------------------------------------------------------------
def _below_minimum(action: Action, entity, at: datetime, minimum: Optional[int]) -> Optional[Outcome]:
    if entity.member_type is not RosterMemberType.STABLE:
        return None
    required = settings.stable_min_members if minimum is None else minimum
    current = member_count(entity, at)
    if current < required:
        return _reject(action, Reason.INSUFFICIENT_MEMBERS, entity, minimum=required, current=current)
    return None


def activate(entity, at: Optional[datetime] = None, minimum: Optional[int] = None) -> Outcome:
    action = Action.ACTIVATE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    if is_active(entity, at):
        return _reject(action, Reason.ACTIVATED, entity)
    if has_future_activation(entity, at):
        return _reject(action, Reason.FUTURE_ACTIVATION, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    short = _below_minimum(action, entity, at, minimum)
    if short is not None:
        return short
    return _accept(action, entity, at, [_open(entity, PeriodKind.ACTIVITY, at)])


def debut(entity, at: Optional[datetime] = None, minimum: Optional[int] = None) -> Outcome:
    """First activation of a stable or title."""
    action = Action.DEBUT
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    if has_activity_periods(entity):
        return _reject(action, Reason.ALREADY_DEBUTED, entity)
    if is_retired(entity, at):
        return _reject(action, Reason.RETIRED, entity)
    short = _below_minimum(action, entity, at, minimum)
    if short is not None:
        return short
    return _accept(action, entity, at, [_open(entity, PeriodKind.ACTIVITY, at)])


def deactivate(entity, at: Optional[datetime] = None) -> Outcome:
    action = Action.DEACTIVATE
    _require(entity, action)
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    inactive = _inactive_reason(entity, at, Reason.DEACTIVATED)
    if inactive:
        return _reject(action, inactive, entity)
    return _accept(action, entity, at, [_close(entity, PeriodKind.ACTIVITY, at)])


def _inactive_reason(entity, at: datetime, already: str) -> Optional[str]:
    if not has_activity_periods(entity):
        return Reason.UNACTIVATED
    if is_inactive(entity, at):
        return already
    if has_future_activation(entity, at):
        return Reason.FUTURE_ACTIVATION
    if is_retired(entity, at):
        return Reason.RETIRED
    if not is_active(entity, at):
        return already
    return None


def disband(stable, at: Optional[datetime] = None) -> Outcome:
    """
    Disband an active stable: close its activity and end every current
    membership.  Refused while any member holds a championship.
    """
    action = Action.DISBAND
    require_stable(stable, action)
    at = moment(at)
    if stable.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, stable)
    inactive = _inactive_reason(stable, at, Reason.DISBANDED)
    if inactive:
        return _reject(action, inactive, stable)
    members = current_members(stable, at)
    for member in members:
        if is_champion(member, at):
            return _member_reject(
                action, Reason.MEMBER_IS_CHAMPION, stable, member, Reason.ACTIVE_CHAMPION,
                titles=_titles(member, at),
            )

    ops = [_close(stable, PeriodKind.ACTIVITY, at)]
    for member in members:
        ops += leave_group_ops(member.key, stable.key, at)
    return _accept(action, stable, at, ops)


# ---------------------------------------------------------------------
# Soft delete
# ---------------------------------------------------------------------
def delete(entity, at: Optional[datetime] = None) -> Outcome:
    action = Action.DELETE
    at = moment(at)
    if entity.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, entity)
    return _accept(action, entity, at, [_open(entity, PeriodKind.DELETION, at)])


def restore(entity, at: Optional[datetime] = None, taken_names: Iterable[str] = ()) -> Outcome:
    """
    Undo a soft delete.

    Parameters
    ----------
    taken_names : Iterable[str]
        Names of live entities of the same type; restoring is refused when
        one of them would clash with *entity*.
    """
    action = Action.RESTORE
    at = moment(at)
    if not entity.is_deleted:
        return _reject(action, Reason.NOT_DELETED, entity)
    for name in taken_names:
        if slugify(name) == entity.slug:
            return _reject(action, Reason.REPLACEMENT_EXISTS, entity, replacement=name)
    return _accept(action, entity, at, [_close(entity, PeriodKind.DELETION, at)])


# ---------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------
RULES = {
    Action.EMPLOY: employ,
    Action.RELEASE: release,
    Action.SUSPEND: suspend,
    Action.REINSTATE: reinstate,
    Action.INJURE: injure,
    Action.CLEAR_INJURY: clear_injury,
    Action.RETIRE: retire,
    Action.UNRETIRE: unretire,
    Action.ACTIVATE: activate,
    Action.DEBUT: debut,
    Action.DEACTIVATE: deactivate,
    Action.DISBAND: disband,
    Action.DELETE: delete,
    Action.RESTORE: restore,
    Action.UPDATE_STABLE: change_debut_date,
    Action.UPDATE_EMPLOYMENT: change_employment_date,
    Action.SPLIT: split_stable,
    Action.ADD_MEMBERS: add_members,
    Action.REMOVE_MEMBERS: remove_members,
}


def handle(entity, action, at: Optional[datetime] = None, **options) -> Outcome:
    """
    Run the guard for *action* (an :class:`Action` or its name) against
    *entity*.  Extra keyword options are passed through to the guard.

    Raises :class:`UnsupportedCapability` when the entity type cannot take
    the action at all.
    """
    action = Action.parse(action)
    return RULES[action](entity, at=at, **options)


def can(entity, action, at: Optional[datetime] = None, **options) -> bool:
    return handle(entity, action, at, **options).ok
