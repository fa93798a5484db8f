"""
ringside.changes
================

What a successful transition asks the caller to persist, and the result
type every guard returns.

A :class:`PeriodChange` is a flat list of :class:`PeriodOp` records, each
opening, closing or rescheduling one period on one entity (identified by
its key).  Group memberships are written on both sides, so joining a
stable produces a ``MEMBER`` op on the stable and a ``MEMBERSHIP`` op on
the wrestler.

:func:`apply_to` is the reference way of applying a change to a snapshot;
a real persistence layer does the same inside one transaction.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum, auto
from typing import Any, List, Optional, Tuple

from .models import RosterMemberType
from .periods import Championship, InvariantViolation, Membership, Period, PeriodKind
from .rejections import Action, Rejection, TransitionRejected


class Op(Enum):
    OPEN = auto()
    CLOSE = auto()
    RESCHEDULE = auto()

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class PeriodOp:
    """
    One write against one entity.

    Parameters
    ----------
    op : Op
        Open, close or reschedule.
    target : str
        Key of the entity whose period collection changes.
    kind : PeriodKind
        Which collection.
    at : datetime
        Effective moment: start of an opened period, end of a closed one,
        new start of a rescheduled one.
    ref : str | None
        The other side of a link: member key for ``MEMBER``, group key for
        ``MEMBERSHIP``, manager key for ``MANAGEMENT``, champion key (on a
        title) or title name (on a champion) for ``CHAMPIONSHIP``.
    member : Any
        Member snapshot embedded by a ``MEMBER`` open.
    """
    op: Op
    target: str
    kind: PeriodKind
    at: datetime
    ref: Optional[str] = None
    member: Any = None

    @classmethod
    def opening(cls, target: str, kind: PeriodKind, at: datetime, ref=None, member=None) -> "PeriodOp":
        return cls(Op.OPEN, target, kind, at, ref, member)

    @classmethod
    def closing(cls, target: str, kind: PeriodKind, at: datetime, ref=None) -> "PeriodOp":
        return cls(Op.CLOSE, target, kind, at, ref)

    @classmethod
    def rescheduling(cls, target: str, kind: PeriodKind, at: datetime) -> "PeriodOp":
        return cls(Op.RESCHEDULE, target, kind, at)

    def __str__(self) -> str:
        ref = f" ({self.ref})" if self.ref else ""
        return f"{self.op} {self.kind}{ref} on {self.target} at {self.at.isoformat()}"


@dataclass(frozen=True)
class PeriodChange:
    """
    Everything one accepted transition writes.

    ``created`` holds brand-new entity snapshots (the stable produced by a
    split); they are stored first and then receive their ops like any
    other target.
    """
    action: Action
    subject: str
    at: datetime
    ops: Tuple[PeriodOp, ...] = ()
    created: Tuple[Any, ...] = ()

    @property
    def targets(self) -> Tuple[str, ...]:
        """Keys touched by this change, in first-touched order."""
        seen: List[str] = []
        for op in self.ops:
            if op.target not in seen:
                seen.append(op.target)
        return tuple(seen)

    def ops_for(self, target: str) -> Tuple[PeriodOp, ...]:
        return tuple(op for op in self.ops if op.target == target)

    def opened(self, kind: PeriodKind) -> List[str]:
        return [op.target for op in self.ops if op.op is Op.OPEN and op.kind is kind]

    def closed(self, kind: PeriodKind) -> List[str]:
        return [op.target for op in self.ops if op.op is Op.CLOSE and op.kind is kind]


@dataclass(frozen=True)
class Outcome:
    """
    Result of a guard: exactly one of ``change`` and ``rejection`` is set.
    """
    change: Optional[PeriodChange] = None
    rejection: Optional[Rejection] = None

    def __post_init__(self):
        if (self.change is None) == (self.rejection is None):
            raise ValueError("an Outcome holds either a change or a rejection, never both or neither")

    @classmethod
    def accept(cls, change: PeriodChange) -> "Outcome":
        return cls(change=change)

    @classmethod
    def reject(cls, rejection: Rejection) -> "Outcome":
        return cls(rejection=rejection)

    @property
    def ok(self) -> bool:
        return self.change is not None

    @property
    def rejected(self) -> bool:
        return self.rejection is not None

    @property
    def reason(self) -> Optional[str]:
        return self.rejection.reason if self.rejection else None

    def unwrap(self) -> PeriodChange:
        """Return the change or raise :class:`TransitionRejected`."""
        if self.rejection is not None:
            raise TransitionRejected(self.rejection)
        return self.change


# ---------------------------------------------------------------------
# Applying changes to snapshots
# ---------------------------------------------------------------------
def _find_open(items, match) -> int:
    for index, item in enumerate(items):
        if item.ended_at is None and match(item):
            return index
    return -1


def _swap(items: tuple, index: int, value) -> tuple:
    return items[:index] + (value,) + items[index + 1:]


def _apply_link(entity, field: str, op: PeriodOp, make):
    items = getattr(entity, field)
    index = _find_open(items, lambda link: link.key == op.ref)
    if op.op is Op.OPEN:
        if index >= 0:
            raise InvariantViolation(f"{entity.key} already has an open {op.kind.value} with {op.ref}")
        return replace(entity, **{field: items + (make(),)})
    if index < 0:
        raise InvariantViolation(f"{entity.key} has no open {op.kind.value} with {op.ref} to close")
    return replace(entity, **{field: _swap(items, index, items[index].close(op.at))})


def _apply_championship(entity, op: PeriodOp):
    items = entity.championships
    on_title = entity.member_type is RosterMemberType.TITLE
    if on_title:
        index = _find_open(items, lambda reign: True)
    else:
        index = _find_open(items, lambda reign: reign.title == op.ref)
    if op.op is Op.OPEN:
        if index >= 0:
            raise InvariantViolation(f"{entity.key} already has an open championship")
        reign = Championship(entity.name, op.ref, op.at) if on_title else Championship(op.ref, entity.key, op.at)
        return replace(entity, championships=items + (reign,))
    if index < 0:
        raise InvariantViolation(f"{entity.key} has no current championship to vacate")
    return replace(entity, championships=_swap(items, index, items[index].close(op.at)))


def _apply_op(entity, op: PeriodOp):
    kind = op.kind
    if kind is PeriodKind.DELETION:
        if op.op is Op.OPEN:
            if entity.deleted_at is not None:
                raise InvariantViolation(f"{entity.key} is already deleted")
            return replace(entity, deleted_at=op.at)
        if entity.deleted_at is None:
            raise InvariantViolation(f"{entity.key} is not deleted")
        return replace(entity, deleted_at=None)

    if kind is PeriodKind.MEMBER:
        field = entity.member_field(op.ref)
        return _apply_link(entity, field, op, lambda: Membership(op.ref, op.at, member=op.member))

    if kind in (PeriodKind.MEMBERSHIP, PeriodKind.MANAGEMENT):
        field = entity.field_for(kind)
        return _apply_link(entity, field, op, lambda: Membership(op.ref, op.at))

    if kind is PeriodKind.CHAMPIONSHIP:
        entity.field_for(kind)
        return _apply_championship(entity, op)

    field = entity.field_for(kind)
    items = getattr(entity, field)
    index = _find_open(items, lambda period: True)
    if op.op is Op.OPEN:
        if index >= 0:
            raise InvariantViolation(f"{entity.key} already has an open {kind.value} period")
        return replace(entity, **{field: items + (Period(op.at),)})
    if index < 0:
        raise InvariantViolation(f"{entity.key} has no open {kind.value} period to {op.op.name.lower()}")
    if op.op is Op.RESCHEDULE:
        return replace(entity, **{field: _swap(items, index, items[index].reschedule(op.at))})
    return replace(entity, **{field: _swap(items, index, items[index].close(op.at))})


def _apply(entity, change: PeriodChange, nested: bool = True) -> Tuple[Any, bool]:
    touched = False
    for op in change.ops:
        if op.target == entity.key:
            entity = _apply_op(entity, op)
            touched = True
    if not nested:
        return entity, touched

    # Carry the change into embedded member snapshots that are, or just were,
    # part of the group.
    for field in ("wrestlers", "tag_teams"):
        links = getattr(entity, field, None)
        if not links:
            continue
        updated = []
        for link in links:
            if link.member is not None and (link.left_at is None or link.left_at == change.at):
                member, hit = _apply(link.member, change)
                if hit:
                    link = link.with_member(member)
                    touched = True
            updated.append(link)
        entity = replace(entity, **{field: tuple(updated)})
    return entity, touched


def apply_to(entity, change: PeriodChange, nested: bool = True):
    """
    Return *entity* with every op of *change* that targets it applied.

    With ``nested`` (the default) the change is carried into embedded
    member snapshots too.  Raises :class:`InvariantViolation` when an op
    would open a second period of a kind, close one that is not open, or
    when nothing in *change* concerns *entity* at all.
    """
    updated, touched = _apply(entity, change, nested)
    if not touched:
        raise InvariantViolation(f"{change.action} change on {change.subject} does not concern {entity.key}")
    return updated


# ---------------------------------------------------------------------
# Group membership op pairs
# ---------------------------------------------------------------------
def leave_group_ops(member_key: str, group_key: str, at: datetime) -> List[PeriodOp]:
    """Both halves of a member leaving the group identified by *group_key*."""
    return [
        PeriodOp.closing(group_key, PeriodKind.MEMBER, at, ref=member_key),
        PeriodOp.closing(member_key, PeriodKind.MEMBERSHIP, at, ref=group_key),
    ]


def join_group_ops(member, group_key: str, at: datetime) -> List[PeriodOp]:
    """Both halves of *member* (a snapshot) joining the group *group_key*."""
    return [
        PeriodOp.opening(group_key, PeriodKind.MEMBER, at, ref=member.key, member=member),
        PeriodOp.opening(member.key, PeriodKind.MEMBERSHIP, at, ref=group_key),
    ]
