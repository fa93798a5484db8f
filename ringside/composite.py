"""
ringside.composite
==================

Rules that look at a stable as a whole: member counting, the activation
minimum, splitting a stable in two, and adding or removing members.

Members can be passed as snapshots or as entity keys; selections are
resolved against the stable's *current* membership.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .changes import Outcome, PeriodChange, PeriodOp, join_group_ops, leave_group_ops
from .models import RosterMemberType, Stable, UnsupportedCapability, entity_key, slugify
from .periods import InvariantViolation, Membership, PeriodKind
from .rejections import Action, Reason, Rejection
from .settings import settings
from .status import (
    current_activation,
    current_stable,
    future_activation,
    has_activity_periods,
    is_employed,
    is_inactive,
    is_retired,
    moment,
)

logger = logging.getLogger(__name__)


def require_stable(entity, action: Action) -> None:
    if entity.member_type is not RosterMemberType.STABLE:
        raise UnsupportedCapability(f"a {entity.label} cannot {action.verb}")


def _reject(action: Action, reason: str, entity, **context) -> Outcome:
    logger.debug(f"{action} refused for {entity.key}: {reason}")
    return Outcome.reject(Rejection.of(action, reason, entity, **context))


def _accept(action: Action, stable, at: datetime, ops: List[PeriodOp], created=()) -> Outcome:
    logger.debug(f"{action} accepted for {stable.key} at {at.isoformat()} ({len(ops)} ops)")
    return Outcome.accept(PeriodChange(action, stable.key, at, tuple(ops), tuple(created)))


def _current_links(stable, field: str, at: datetime) -> List[Membership]:
    return [link for link in getattr(stable, field) if link.is_current(at)]


# ---------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------
def member_count(stable, at: Optional[datetime] = None, weight: Optional[int] = None) -> int:
    """
    Weighted number of current members: each wrestler counts once, each
    tag team counts ``weight`` times (``settings.tag_team_member_weight``
    by default, i.e. two wrestlers).
    """
    at = moment(at)
    weight = settings.tag_team_member_weight if weight is None else weight
    wrestlers = len(_current_links(stable, "wrestlers", at))
    tag_teams = len(_current_links(stable, "tag_teams", at))
    return wrestlers + weight * tag_teams


def can_activate(stable, at: Optional[datetime] = None, minimum: Optional[int] = None) -> bool:
    """True when *stable* has enough current members to be activated."""
    minimum = settings.stable_min_members if minimum is None else minimum
    return member_count(stable, at) >= minimum


# ---------------------------------------------------------------------
# Selecting members
# ---------------------------------------------------------------------
def _key_of(pick, member_type: RosterMemberType) -> str:
    if isinstance(pick, str):
        return pick if ":" in pick else entity_key(member_type, pick)
    return pick.key


def _name_of(pick) -> str:
    if isinstance(pick, str):
        return pick.partition(":")[2] if ":" in pick else pick
    return pick.name


def _resolve(stable, picks: Iterable, member_type: RosterMemberType, at: datetime):
    """
    Map each pick onto the stable's current membership link.  Returns
    ``(links, missing)`` where *missing* is the first pick that is not a
    current member.
    """
    field = "wrestlers" if member_type is RosterMemberType.WRESTLER else "tag_teams"
    current = {link.key: link for link in _current_links(stable, field, at)}
    links = []
    for pick in picks:
        link = current.get(_key_of(pick, member_type))
        if link is None:
            return links, pick
        links.append(link)
    return links, None


# ---------------------------------------------------------------------
# Split
# ---------------------------------------------------------------------
def split_stable(
    original,
    new_name: str,
    wrestlers: Sequence = (),
    tag_teams: Sequence = (),
    at: Optional[datetime] = None,
    taken_names: Iterable[str] = (),
) -> Outcome:
    """
    Move the selected members of *original* into a new stable called
    *new_name*, activated at *at*.

    Parameters
    ----------
    wrestlers, tag_teams : Sequence
        Members to move, as snapshots or keys.  Every one of them must be a
        current, employed member of *original*.  An empty selection creates
        an empty stable.
    taken_names : Iterable[str]
        Names of existing stables; *new_name* must not clash with any of
        them (nor with *original*).

    On success ``change.created`` holds the bare new stable.  Either every
    op applies or, on rejection, nothing does.
    """
    action = Action.SPLIT
    require_stable(original, action)
    at = moment(at)
    if original.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, original)
    if not new_name or not new_name.strip():
        return _reject(action, Reason.BLANK_NAME, original)
    taken = {slugify(name) for name in taken_names} | {original.slug}
    if slugify(new_name) in taken:
        return _reject(action, Reason.NAME_TAKEN, original, name=new_name)

    moving: List[Membership] = []
    for picks, member_type in (
        (wrestlers, RosterMemberType.WRESTLER),
        (tag_teams, RosterMemberType.TAG_TEAM),
    ):
        links, missing = _resolve(original, picks, member_type, at)
        if missing is not None:
            return _reject(
                action, Reason.NOT_A_MEMBER, original,
                member=_name_of(missing), member_type=member_type.value,
            )
        moving += links
    moving = list({link.key: link for link in moving}.values())

    for link in moving:
        member = link.member
        if member is None:
            raise InvariantViolation(f"membership of {link.key} carries no member snapshot")
        if not is_employed(member, at):
            return _reject(
                action, Reason.MEMBER_NOT_EMPLOYED, original,
                member=member.name, member_type=member.member_type.value,
            )

    new_stable = Stable(new_name.strip())
    ops = [PeriodOp.opening(new_stable.key, PeriodKind.ACTIVITY, at)]
    for link in moving:
        ops += leave_group_ops(link.key, original.key, at)
        ops += join_group_ops(link.member, new_stable.key, at)
    logger.info(f"splitting {len(moving)} member(s) of {original.key} into {new_stable.key}")
    return _accept(action, original, at, ops, created=(new_stable,))


# ---------------------------------------------------------------------
# Adding / removing members
# ---------------------------------------------------------------------
def add_members(stable, wrestlers: Sequence = (), tag_teams: Sequence = (), at: Optional[datetime] = None) -> Outcome:
    """
    Bring wrestler and tag team snapshots into *stable*.  Managers are
    never direct members; passing one raises :class:`UnsupportedCapability`.
    """
    action = Action.ADD_MEMBERS
    require_stable(stable, action)
    at = moment(at)
    if stable.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, stable)
    if is_retired(stable, at):
        return _reject(action, Reason.RETIRED, stable)

    present = {link.key for link in _current_links(stable, "wrestlers", at) + _current_links(stable, "tag_teams", at)}
    ops: List[PeriodOp] = []
    for member in list(wrestlers) + list(tag_teams):
        stable.member_field(member.key)
        context = {"member": member.name, "member_type": member.member_type.value}
        if member.is_deleted:
            return _reject(action, Reason.MEMBER_DELETED, stable, **context)
        if member.key in present:
            return _reject(action, Reason.ALREADY_MEMBER, stable, **context)
        home = current_stable(member, at)
        if home is not None and home != stable.key:
            return _reject(action, Reason.IN_ANOTHER_STABLE, stable, stable=home, **context)
        if is_retired(member, at):
            return _reject(action, Reason.MEMBER_RETIRED, stable, **context)
        ops += join_group_ops(member, stable.key, at)
        present.add(member.key)
    return _accept(action, stable, at, ops)


def remove_members(stable, members: Sequence, at: Optional[datetime] = None) -> Outcome:
    """End the membership of each of *members* (snapshots or keys) in *stable*."""
    action = Action.REMOVE_MEMBERS
    require_stable(stable, action)
    at = moment(at)
    if stable.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, stable)

    current = {link.key: link for link in _current_links(stable, "wrestlers", at) + _current_links(stable, "tag_teams", at)}
    ops: List[PeriodOp] = []
    for member in members:
        key = member if isinstance(member, str) else member.key
        if key not in current:
            member_type = key.partition(":")[0]
            return _reject(action, Reason.NOT_A_MEMBER, stable, member=_name_of(member), member_type=member_type)
        ops += leave_group_ops(key, stable.key, at)
    return _accept(action, stable, at, ops)


# ---------------------------------------------------------------------
# Debut date
# ---------------------------------------------------------------------
def change_debut_date(stable, new_date: datetime, at: Optional[datetime] = None) -> Outcome:
    """
    Move the debut of *stable* to *new_date*.

    A stable that is currently active keeps its debut date unless the new
    date falls on the same day; a pending activation is rescheduled and an
    unactivated stable gets one opened.
    """
    action = Action.UPDATE_STABLE
    require_stable(stable, action)
    at = moment(at)
    if stable.is_deleted:
        return _reject(action, Reason.ENTITY_DELETED, stable)
    current = current_activation(stable, at)
    if current is not None:
        if not current.started_on(new_date):
            return _reject(action, Reason.CURRENTLY_ACTIVE, stable)
        return _accept(action, stable, at, [])
    if is_retired(stable, at):
        return _reject(action, Reason.RETIRED, stable)
    if is_inactive(stable, at):
        return _reject(action, Reason.DEACTIVATED, stable)

    if future_activation(stable, at) is not None:
        ops = [PeriodOp.rescheduling(stable.key, PeriodKind.ACTIVITY, new_date)]
    elif not has_activity_periods(stable):
        ops = [PeriodOp.opening(stable.key, PeriodKind.ACTIVITY, new_date)]
    else:
        return _reject(action, Reason.DEACTIVATED, stable)
    return _accept(action, stable, at, ops)
