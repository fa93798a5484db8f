"""
ringside.periods
================

Time-bounded value objects shared by every roster entity.

A :class:`Period` is an immutable ``started_at`` / ``ended_at`` span.  An open
period (``ended_at is None``) is *current* once it has started and *future*
before that.  Periods are append-only history: closing one returns a new
value with ``ended_at`` filled in, nothing is ever deleted.

Group membership and title reigns are modelled the same way by
:class:`Membership` and :class:`Championship`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class InvariantViolation(ValueError):
    """Snapshot data or a change breaks a structural rule of the model.

    This is never a business rejection: it means the caller handed the
    engine corrupt data (two current periods of one kind, a period ending
    before it starts, ...) or tried to apply a change to the wrong snapshot.
    """


class PeriodKind(Enum):
    """Every kind of span the engine opens or closes."""
    EMPLOYMENT = "employment"
    SUSPENSION = "suspension"
    INJURY = "injury"
    RETIREMENT = "retirement"
    ACTIVITY = "activity"
    MEMBER = "member"            # parent side of a group membership
    MEMBERSHIP = "membership"    # member side of a group membership
    MANAGEMENT = "management"
    CHAMPIONSHIP = "championship"
    DELETION = "deletion"

    def __str__(self) -> str:
        return self.name


def _check_span(start: datetime, end: Optional[datetime], what: str) -> None:
    if end is not None and end < start:
        raise InvariantViolation(
            f"{what} cannot end ({end.isoformat()}) before it starts ({start.isoformat()})"
        )


@dataclass(frozen=True)
class Period:
    """
    A status span such as an employment, injury or activity period.

    Parameters
    ----------
    started_at : datetime
        When the span begins.
    ended_at : datetime | None, default=None
        When it ended; ``None`` means ongoing (or not yet started).
    """
    started_at: datetime
    ended_at: Optional[datetime] = None

    def __post_init__(self):
        _check_span(self.started_at, self.ended_at, "period")

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------
    @property
    def is_open(self) -> bool:
        return self.ended_at is None

    @property
    def is_closed(self) -> bool:
        return self.ended_at is not None

    def is_current(self, at: datetime) -> bool:
        """Open and already started at *at*."""
        return self.ended_at is None and self.started_at <= at

    def is_future(self, at: datetime) -> bool:
        """Open but not effective until after *at*."""
        return self.ended_at is None and self.started_at > at

    def started_on(self, when: datetime) -> bool:
        return self.started_at.date() == when.date()

    # ------------------------------------------------------------------
    # Transformations (return new values)
    # ------------------------------------------------------------------
    def close(self, at: datetime) -> "Period":
        if self.ended_at is not None:
            raise InvariantViolation(f"period started {self.started_at.isoformat()} is already closed")
        return replace(self, ended_at=at)

    def reschedule(self, at: datetime) -> "Period":
        return replace(self, started_at=at)


@dataclass(frozen=True)
class Membership:
    """
    A join period between a group (tag team, stable) and one of its members,
    or between a managed entity and its manager.

    On the parent side ``key`` is the member's entity key and ``member``
    carries the member snapshot; on the member side ``key`` is the parent's
    key and ``member`` is left empty.
    """
    key: str
    joined_at: datetime
    left_at: Optional[datetime] = None
    member: Any = None

    def __post_init__(self):
        _check_span(self.joined_at, self.left_at, f"membership of {self.key}")

    @property
    def started_at(self) -> datetime:
        return self.joined_at

    @property
    def ended_at(self) -> Optional[datetime]:
        return self.left_at

    def is_current(self, at: datetime) -> bool:
        return self.left_at is None and self.joined_at <= at

    def is_future(self, at: datetime) -> bool:
        return self.left_at is None and self.joined_at > at

    def close(self, at: datetime) -> "Membership":
        if self.left_at is not None:
            raise InvariantViolation(f"membership of {self.key} is already closed")
        return replace(self, left_at=at)

    def with_member(self, member: Any) -> "Membership":
        return replace(self, member=member)


@dataclass(frozen=True)
class Championship:
    """
    A title reign.  Stored on the title (its lineage) and on the champion
    (the reigns it holds); ``champion`` is the champion's entity key.
    """
    title: str
    champion: str
    won_at: datetime
    lost_at: Optional[datetime] = None

    def __post_init__(self):
        _check_span(self.won_at, self.lost_at, f"{self.title} reign")

    @property
    def started_at(self) -> datetime:
        return self.won_at

    @property
    def ended_at(self) -> Optional[datetime]:
        return self.lost_at

    def is_current(self, at: datetime) -> bool:
        return self.lost_at is None and self.won_at <= at

    def close(self, at: datetime) -> "Championship":
        if self.lost_at is not None:
            raise InvariantViolation(f"{self.title} reign is already over")
        return replace(self, lost_at=at)


@dataclass(frozen=True)
class Restrictions:
    """
    Business flags carried on a snapshot that block specific transitions.

    Every field defaults to "nothing blocking", so most snapshots never set
    them.
    """
    notice_given_at: Optional[datetime] = None
    disciplinary_review_pending: bool = False
    medical_clearance_pending: bool = False
    in_treatment: bool = False
    permanently_retired: bool = False
    medical_restriction: Optional[str] = None
    contractual_obligation: Optional[str] = None


NO_RESTRICTIONS = Restrictions()
