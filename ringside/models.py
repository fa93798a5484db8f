"""
ringside.models
===============

Immutable snapshots of the six roster entity types and the enums used to
describe their derived status.

Each entity is a frozen dataclass holding only the period collections its
type supports.  The supported kinds are declared explicitly per type in
``capabilities`` rather than inherited, so a :class:`Title` simply has no
``employments`` and asking it for one raises :class:`UnsupportedCapability`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import ClassVar, FrozenSet, Optional, Tuple

from .periods import (
    NO_RESTRICTIONS,
    Championship,
    Membership,
    Period,
    PeriodKind,
    Restrictions,
)


class UnsupportedCapability(TypeError):
    """An entity was asked for a period kind or action its type lacks."""


class RosterMemberType(Enum):
    """Entity types known to the engine; the value doubles as key prefix."""
    WRESTLER = "wrestler"
    MANAGER = "manager"
    REFEREE = "referee"
    TAG_TEAM = "tag_team"
    STABLE = "stable"
    TITLE = "title"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")

    @property
    def plural(self) -> str:
        return f"{self.label}s"

    def __str__(self) -> str:
        return self.name


class EmploymentStatus(Enum):
    """Derived status of an employable entity, most restrictive first."""
    RETIRED = auto()
    SUSPENDED = auto()
    INJURED = auto()
    EMPLOYED = auto()
    FUTURE_EMPLOYMENT = auto()
    RELEASED = auto()
    UNEMPLOYED = auto()

    def __str__(self) -> str:        # nicer REPL display
        return self.name


class ActivityStatus(Enum):
    """Derived status of a stable or title, most restrictive first."""
    RETIRED = auto()
    ACTIVE = auto()
    PENDING_ACTIVATION = auto()
    INACTIVE = auto()
    UNACTIVATED = auto()

    def __str__(self) -> str:
        return self.name


# ---------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------
def slugify(name: str) -> str:
    """lower‑cased, dash‑separated form of *name*."""
    return "-".join(name.lower().split())


def entity_key(member_type: RosterMemberType, name: str) -> str:
    return f"{member_type.value}:{slugify(name)}"


def key_type(key: str) -> RosterMemberType:
    """Return the entity type encoded in *key* (``"wrestler:jey-uso"``)."""
    prefix, _, _ = key.partition(":")
    return RosterMemberType(prefix)


# Attribute holding each period kind on the snapshots below.
_FIELDS = {
    PeriodKind.EMPLOYMENT: "employments",
    PeriodKind.SUSPENSION: "suspensions",
    PeriodKind.INJURY: "injuries",
    PeriodKind.RETIREMENT: "retirements",
    PeriodKind.ACTIVITY: "activations",
    PeriodKind.MEMBERSHIP: "memberships",
    PeriodKind.MANAGEMENT: "managers",
    PeriodKind.CHAMPIONSHIP: "championships",
}

# Parent-side attribute holding members of a given type.
_MEMBER_FIELDS = {
    RosterMemberType.WRESTLER: "wrestlers",
    RosterMemberType.TAG_TEAM: "tag_teams",
}


class _RosterEntity:
    """Identity and capability helpers shared by every snapshot type."""

    member_type: ClassVar[RosterMemberType]
    capabilities: ClassVar[FrozenSet[PeriodKind]]
    member_types: ClassVar[FrozenSet[RosterMemberType]] = frozenset()

    name: str
    deleted_at: Optional[datetime]
    restrictions: Restrictions

    @property
    def slug(self) -> str:
        return slugify(self.name)

    @property
    def key(self) -> str:
        return entity_key(self.member_type, self.name)

    @property
    def label(self) -> str:
        return self.member_type.label

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def supports(self, kind: PeriodKind) -> bool:
        if kind is PeriodKind.DELETION:
            return True
        if kind is PeriodKind.MEMBER:
            return bool(self.member_types)
        return kind in self.capabilities

    def field_for(self, kind: PeriodKind) -> str:
        if not self.supports(kind) or kind not in _FIELDS:
            raise UnsupportedCapability(f"a {self.label} has no {kind.value} periods")
        return _FIELDS[kind]

    def periods(self, kind: PeriodKind) -> tuple:
        """Return the collection holding *kind* periods."""
        return getattr(self, self.field_for(kind))

    def member_field(self, member_key: str) -> str:
        member_type = key_type(member_key)
        if member_type not in self.member_types:
            raise UnsupportedCapability(f"a {self.label} cannot have {member_type.plural} as members")
        return _MEMBER_FIELDS[member_type]


_PERSON = frozenset({
    PeriodKind.EMPLOYMENT,
    PeriodKind.SUSPENSION,
    PeriodKind.INJURY,
    PeriodKind.RETIREMENT,
})


@dataclass(frozen=True)
class Wrestler(_RosterEntity):
    """
    A wrestler: employable, suspendable, injurable and retirable; joins tag
    teams and stables, can be managed and can hold titles.
    """
    name: str
    employments: Tuple[Period, ...] = ()
    suspensions: Tuple[Period, ...] = ()
    injuries: Tuple[Period, ...] = ()
    retirements: Tuple[Period, ...] = ()
    memberships: Tuple[Membership, ...] = ()
    managers: Tuple[Membership, ...] = ()
    championships: Tuple[Championship, ...] = ()
    restrictions: Restrictions = NO_RESTRICTIONS
    deleted_at: Optional[datetime] = None

    member_type: ClassVar[RosterMemberType] = RosterMemberType.WRESTLER
    capabilities: ClassVar[FrozenSet[PeriodKind]] = _PERSON | {
        PeriodKind.MEMBERSHIP,
        PeriodKind.MANAGEMENT,
        PeriodKind.CHAMPIONSHIP,
    }


@dataclass(frozen=True)
class Manager(_RosterEntity):
    """A manager.  Never a direct stable member; see :mod:`ringside.relationships`."""
    name: str
    employments: Tuple[Period, ...] = ()
    suspensions: Tuple[Period, ...] = ()
    injuries: Tuple[Period, ...] = ()
    retirements: Tuple[Period, ...] = ()
    memberships: Tuple[Membership, ...] = ()
    restrictions: Restrictions = NO_RESTRICTIONS
    deleted_at: Optional[datetime] = None

    member_type: ClassVar[RosterMemberType] = RosterMemberType.MANAGER
    capabilities: ClassVar[FrozenSet[PeriodKind]] = _PERSON | {PeriodKind.MEMBERSHIP}


@dataclass(frozen=True)
class Referee(_RosterEntity):
    name: str
    employments: Tuple[Period, ...] = ()
    suspensions: Tuple[Period, ...] = ()
    injuries: Tuple[Period, ...] = ()
    retirements: Tuple[Period, ...] = ()
    restrictions: Restrictions = NO_RESTRICTIONS
    deleted_at: Optional[datetime] = None

    member_type: ClassVar[RosterMemberType] = RosterMemberType.REFEREE
    capabilities: ClassVar[FrozenSet[PeriodKind]] = _PERSON


@dataclass(frozen=True)
class TagTeam(_RosterEntity):
    """
    A tag team.  It has no injuries of its own: its availability is derived
    from its current wrestlers, held in ``wrestlers`` as parent-side
    memberships carrying the wrestler snapshots.
    """
    name: str
    employments: Tuple[Period, ...] = ()
    suspensions: Tuple[Period, ...] = ()
    retirements: Tuple[Period, ...] = ()
    wrestlers: Tuple[Membership, ...] = ()
    memberships: Tuple[Membership, ...] = ()
    managers: Tuple[Membership, ...] = ()
    championships: Tuple[Championship, ...] = ()
    restrictions: Restrictions = NO_RESTRICTIONS
    deleted_at: Optional[datetime] = None

    member_type: ClassVar[RosterMemberType] = RosterMemberType.TAG_TEAM
    capabilities: ClassVar[FrozenSet[PeriodKind]] = frozenset({
        PeriodKind.EMPLOYMENT,
        PeriodKind.SUSPENSION,
        PeriodKind.RETIREMENT,
        PeriodKind.MEMBERSHIP,
        PeriodKind.MANAGEMENT,
        PeriodKind.CHAMPIONSHIP,
    })
    member_types: ClassVar[FrozenSet[RosterMemberType]] = frozenset({RosterMemberType.WRESTLER})


@dataclass(frozen=True)
class Stable(_RosterEntity):
    """A stable of wrestlers and tag teams, activated rather than employed."""
    name: str
    activations: Tuple[Period, ...] = ()
    retirements: Tuple[Period, ...] = ()
    wrestlers: Tuple[Membership, ...] = ()
    tag_teams: Tuple[Membership, ...] = ()
    restrictions: Restrictions = NO_RESTRICTIONS
    deleted_at: Optional[datetime] = None

    member_type: ClassVar[RosterMemberType] = RosterMemberType.STABLE
    capabilities: ClassVar[FrozenSet[PeriodKind]] = frozenset({
        PeriodKind.ACTIVITY,
        PeriodKind.RETIREMENT,
    })
    member_types: ClassVar[FrozenSet[RosterMemberType]] = frozenset({
        RosterMemberType.WRESTLER,
        RosterMemberType.TAG_TEAM,
    })


@dataclass(frozen=True)
class Title(_RosterEntity):
    """A championship title; ``championships`` is its lineage."""
    name: str
    activations: Tuple[Period, ...] = ()
    retirements: Tuple[Period, ...] = ()
    championships: Tuple[Championship, ...] = ()
    restrictions: Restrictions = NO_RESTRICTIONS
    deleted_at: Optional[datetime] = None

    member_type: ClassVar[RosterMemberType] = RosterMemberType.TITLE
    capabilities: ClassVar[FrozenSet[PeriodKind]] = frozenset({
        PeriodKind.ACTIVITY,
        PeriodKind.RETIREMENT,
        PeriodKind.CHAMPIONSHIP,
    })
