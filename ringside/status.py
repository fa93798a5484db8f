"""
ringside.status
===============

Pure status predicates over entity snapshots.

Every function takes ``(entity, at=None)`` where *at* is the moment the
question is asked (``datetime.now()`` when omitted) and never changes the
snapshot, so asking the same question twice gives the same answer.

An entity with no periods of a kind has simply never had that status;
asking a tag team whether it is injured returns ``False`` rather than
raising.  The evaluator trusts the one-current-period-per-kind invariant
and does not try to repair snapshots that break it.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from .models import (
    ActivityStatus,
    EmploymentStatus,
    RosterMemberType,
    key_type,
)
from .periods import Championship, InvariantViolation, Membership, Period, PeriodKind


def moment(at: Optional[datetime] = None) -> datetime:
    """Return *at*, or the current time when it is ``None``."""
    return datetime.now() if at is None else at


# ---------------------------------------------------------------------
# Generic period helpers
# ---------------------------------------------------------------------
def periods_of(entity, kind: PeriodKind) -> tuple:
    if not entity.supports(kind):
        return ()
    return entity.periods(kind)


def current_period(entity, kind: PeriodKind, at: Optional[datetime] = None) -> Optional[Period]:
    at = moment(at)
    current = [period for period in periods_of(entity, kind) if period.is_current(at)]
    if len(current) > 1:
        raise InvariantViolation(f"{entity.key} has {len(current)} current {kind.value} periods")
    return current[0] if current else None


def future_period(entity, kind: PeriodKind, at: Optional[datetime] = None) -> Optional[Period]:
    at = moment(at)
    for period in periods_of(entity, kind):
        if period.is_future(at):
            return period
    return None


def previous_periods(entity, kind: PeriodKind, at: Optional[datetime] = None) -> List[Period]:
    """Closed periods of *kind* that ended on or before *at*, oldest first."""
    at = moment(at)
    closed = [p for p in periods_of(entity, kind) if p.ended_at is not None and p.ended_at <= at]
    return sorted(closed, key=lambda p: p.started_at)


def has_periods(entity, kind: PeriodKind) -> bool:
    return bool(periods_of(entity, kind))


# ---------------------------------------------------------------------
# Employment
# ---------------------------------------------------------------------
def current_employment(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return current_period(entity, PeriodKind.EMPLOYMENT, at)


def future_employment(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return future_period(entity, PeriodKind.EMPLOYMENT, at)


def previous_employments(entity, at: Optional[datetime] = None) -> List[Period]:
    return previous_periods(entity, PeriodKind.EMPLOYMENT, at)


def first_employment(entity) -> Optional[Period]:
    employments = periods_of(entity, PeriodKind.EMPLOYMENT)
    if not employments:
        return None
    return min(employments, key=lambda p: p.started_at)


def has_employments(entity) -> bool:
    return has_periods(entity, PeriodKind.EMPLOYMENT)


def has_employment_history(entity, at: Optional[datetime] = None) -> bool:
    return bool(previous_employments(entity, at))


def is_employed(entity, at: Optional[datetime] = None) -> bool:
    return current_employment(entity, at) is not None


def has_future_employment(entity, at: Optional[datetime] = None) -> bool:
    return future_employment(entity, at) is not None


is_future_employed = has_future_employment


def is_unemployed(entity, at: Optional[datetime] = None) -> bool:
    """
    Never employed at all, not even in the future.  *at* is accepted for a
    uniform signature; the answer does not depend on time.
    """
    return not has_employments(entity)


def is_released(entity, at: Optional[datetime] = None) -> bool:
    """Employed once, not now, not retired and nothing lined up."""
    return (
        has_employment_history(entity, at)
        and not is_employed(entity, at)
        and not is_retired(entity, at)
        and not has_future_employment(entity, at)
    )


# ---------------------------------------------------------------------
# Suspension / injury / retirement
# ---------------------------------------------------------------------
def current_suspension(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return current_period(entity, PeriodKind.SUSPENSION, at)


def previous_suspensions(entity, at: Optional[datetime] = None) -> List[Period]:
    return previous_periods(entity, PeriodKind.SUSPENSION, at)


def has_suspensions(entity) -> bool:
    return has_periods(entity, PeriodKind.SUSPENSION)


def is_suspended(entity, at: Optional[datetime] = None) -> bool:
    return current_suspension(entity, at) is not None


def current_injury(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return current_period(entity, PeriodKind.INJURY, at)


def previous_injuries(entity, at: Optional[datetime] = None) -> List[Period]:
    return previous_periods(entity, PeriodKind.INJURY, at)


def has_injuries(entity) -> bool:
    return has_periods(entity, PeriodKind.INJURY)


def is_injured(entity, at: Optional[datetime] = None) -> bool:
    return current_injury(entity, at) is not None


def current_retirement(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return current_period(entity, PeriodKind.RETIREMENT, at)


def previous_retirements(entity, at: Optional[datetime] = None) -> List[Period]:
    return previous_periods(entity, PeriodKind.RETIREMENT, at)


def has_retirements(entity) -> bool:
    return has_periods(entity, PeriodKind.RETIREMENT)


def is_retired(entity, at: Optional[datetime] = None) -> bool:
    return current_retirement(entity, at) is not None


# ---------------------------------------------------------------------
# Activity (stables and titles)
# ---------------------------------------------------------------------
def current_activation(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return current_period(entity, PeriodKind.ACTIVITY, at)


def future_activation(entity, at: Optional[datetime] = None) -> Optional[Period]:
    return future_period(entity, PeriodKind.ACTIVITY, at)


def previous_activations(entity, at: Optional[datetime] = None) -> List[Period]:
    return previous_periods(entity, PeriodKind.ACTIVITY, at)


def has_activity_periods(entity) -> bool:
    return has_periods(entity, PeriodKind.ACTIVITY)


def is_active(entity, at: Optional[datetime] = None) -> bool:
    return current_activation(entity, at) is not None


def has_future_activation(entity, at: Optional[datetime] = None) -> bool:
    return future_activation(entity, at) is not None


def is_unactivated(entity, at: Optional[datetime] = None) -> bool:
    """
    Never activated at all.  *at* is accepted for a uniform signature; the
    answer does not depend on time.
    """
    return not has_activity_periods(entity)


def is_inactive(entity, at: Optional[datetime] = None) -> bool:
    return (
        bool(previous_activations(entity, at))
        and not is_active(entity, at)
        and not has_future_activation(entity, at)
        and not is_retired(entity, at)
    )


# A stable that was active and no longer is has been disbanded.
is_disbanded = is_inactive


# ---------------------------------------------------------------------
# Memberships
# ---------------------------------------------------------------------
def _member_links(group, field: str, at: Optional[datetime]) -> List[Membership]:
    at = moment(at)
    return [m for m in getattr(group, field, ()) if m.is_current(at)]


def _snapshots(links: List[Membership]) -> list:
    members = []
    for link in links:
        if link.member is None:
            raise InvariantViolation(f"membership of {link.key} carries no member snapshot")
        members.append(link.member)
    return members


def current_wrestlers(group, at: Optional[datetime] = None) -> list:
    """Snapshots of the wrestlers currently in *group* (tag team or stable)."""
    return _snapshots(_member_links(group, "wrestlers", at))


def current_tag_teams(stable, at: Optional[datetime] = None) -> list:
    return _snapshots(_member_links(stable, "tag_teams", at))


def current_members(group, at: Optional[datetime] = None) -> list:
    return current_wrestlers(group, at) + current_tag_teams(group, at)


def current_member_keys(group, at: Optional[datetime] = None) -> List[str]:
    links = _member_links(group, "wrestlers", at) + _member_links(group, "tag_teams", at)
    return [link.key for link in links]


def current_groups(entity, at: Optional[datetime] = None) -> List[Membership]:
    """Member-side memberships of *entity* that are current at *at*."""
    return _member_links(entity, "memberships", at)


def _current_group_of(entity, member_type: RosterMemberType, at) -> Optional[str]:
    for link in current_groups(entity, at):
        if key_type(link.key) is member_type:
            return link.key
    return None


def current_stable(entity, at: Optional[datetime] = None) -> Optional[str]:
    """Key of the stable *entity* currently belongs to, if any."""
    return _current_group_of(entity, RosterMemberType.STABLE, at)


def current_tag_team(entity, at: Optional[datetime] = None) -> Optional[str]:
    return _current_group_of(entity, RosterMemberType.TAG_TEAM, at)


def current_managers(entity, at: Optional[datetime] = None) -> List[str]:
    return [link.key for link in _member_links(entity, "managers", at)]


# ---------------------------------------------------------------------
# Championships
# ---------------------------------------------------------------------
def current_championships(entity, at: Optional[datetime] = None) -> List[Championship]:
    at = moment(at)
    return [c for c in getattr(entity, "championships", ()) if c.is_current(at)]


def is_champion(entity, at: Optional[datetime] = None) -> bool:
    if entity.member_type is RosterMemberType.TITLE:
        return False
    return bool(current_championships(entity, at))


def current_champion(title, at: Optional[datetime] = None) -> Optional[Championship]:
    reigns = current_championships(title, at)
    return reigns[0] if reigns else None


# ---------------------------------------------------------------------
# Composite availability
# ---------------------------------------------------------------------
def is_bookable(entity, at: Optional[datetime] = None) -> bool:
    """
    Available for matches: employed and not suspended, injured or retired.
    A tag team is bookable only when every current wrestler is as well.
    """
    at = moment(at)
    if not (
        is_employed(entity, at)
        and not is_suspended(entity, at)
        and not is_injured(entity, at)
        and not is_retired(entity, at)
    ):
        return False
    if entity.member_type is RosterMemberType.TAG_TEAM:
        return all(is_bookable(w, at) for w in current_wrestlers(entity, at))
    return True


# Managers and referees are "available" rather than "bookable".
is_available = is_bookable


# ---------------------------------------------------------------------
# Derived status
# ---------------------------------------------------------------------
def employment_status(entity, at: Optional[datetime] = None) -> EmploymentStatus:
    at = moment(at)
    if is_retired(entity, at):
        return EmploymentStatus.RETIRED
    if is_suspended(entity, at):
        return EmploymentStatus.SUSPENDED
    if is_injured(entity, at):
        return EmploymentStatus.INJURED
    if is_employed(entity, at):
        return EmploymentStatus.EMPLOYED
    if has_future_employment(entity, at):
        return EmploymentStatus.FUTURE_EMPLOYMENT
    if is_released(entity, at):
        return EmploymentStatus.RELEASED
    return EmploymentStatus.UNEMPLOYED


def activity_status(entity, at: Optional[datetime] = None) -> ActivityStatus:
    at = moment(at)
    if is_retired(entity, at):
        return ActivityStatus.RETIRED
    if is_active(entity, at):
        return ActivityStatus.ACTIVE
    if has_future_activation(entity, at):
        return ActivityStatus.PENDING_ACTIVATION
    if previous_activations(entity, at):
        return ActivityStatus.INACTIVE
    return ActivityStatus.UNACTIVATED


def status(entity, at: Optional[datetime] = None):
    """Employment status for employables, activity status for stables and titles."""
    if entity.supports(PeriodKind.ACTIVITY):
        return activity_status(entity, at)
    return employment_status(entity, at)
