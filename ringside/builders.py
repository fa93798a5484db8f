"""
ringside.builders
=================

Fluent factories for entity snapshots, mostly for tests and fixtures.

Builders are immutable: every method returns a new builder and leaves the
old one untouched, so a half-configured builder can be shared and
branched freely.

>>> base = wrestler("Jey Uso").employed(datetime(2020, 1, 1))
>>> hurt = base.injured(datetime(2021, 5, 1)).build()
>>> healthy = base.build()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Optional

from .models import Manager, Referee, Stable, TagTeam, Title, Wrestler
from .periods import Championship, Membership, Period

# Default start of any history a builder invents.
LONG_AGO = datetime(2000, 1, 1)


def _snapshot(item):
    return item.build() if isinstance(item, EntityBuilder) else item


@dataclass(frozen=True)
class EntityBuilder:
    """Wraps one snapshot under construction."""
    entity: Any

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _with(self, **changes) -> "EntityBuilder":
        return replace(self, entity=replace(self.entity, **changes))

    def _append(self, field: str, *items) -> "EntityBuilder":
        return self._with(**{field: getattr(self.entity, field) + tuple(items)})

    def _open_index(self, field: str) -> int:
        for index, period in enumerate(getattr(self.entity, field)):
            if period.ended_at is None:
                return index
        return -1

    def _close_open(self, field: str, at: datetime) -> "EntityBuilder":
        index = self._open_index(field)
        if index < 0:
            return self
        items = getattr(self.entity, field)
        return self._with(**{field: items[:index] + (items[index].close(at),) + items[index + 1:]})

    def _ensure_employed(self, since: datetime) -> "EntityBuilder":
        if self._open_index("employments") >= 0:
            return self
        return self._append("employments", Period(min(since, LONG_AGO)))

    # ------------------------------------------------------------------
    # Employment
    # ------------------------------------------------------------------
    def employed(self, since: datetime = LONG_AGO) -> "EntityBuilder":
        return self._append("employments", Period(since))

    def future_employed(self, starts: Optional[datetime] = None) -> "EntityBuilder":
        starts = starts or datetime.now() + timedelta(days=30)
        return self._append("employments", Period(starts))

    def released(self, since: datetime = LONG_AGO, ended: Optional[datetime] = None) -> "EntityBuilder":
        return self._append("employments", Period(since, ended or since + timedelta(days=365)))

    def suspended(self, since: Optional[datetime] = None) -> "EntityBuilder":
        """Employed (from :data:`LONG_AGO` if not already) and suspended."""
        since = since or LONG_AGO + timedelta(days=30)
        return self._ensure_employed(since)._append("suspensions", Period(since))

    def injured(self, since: Optional[datetime] = None) -> "EntityBuilder":
        since = since or LONG_AGO + timedelta(days=30)
        return self._ensure_employed(since)._append("injuries", Period(since))

    def retired(self, since: Optional[datetime] = None) -> "EntityBuilder":
        """
        Retired at *since*.  Open employment (or activity) is closed first;
        with no history at all one is invented from :data:`LONG_AGO`.
        """
        since = since or LONG_AGO + timedelta(days=730)
        field = "activations" if hasattr(self.entity, "activations") else "employments"
        builder = self
        if not getattr(self.entity, field):
            builder = builder._append(field, Period(min(since, LONG_AGO)))
        builder = builder._close_open(field, since)
        return builder._append("retirements", Period(since))

    # ------------------------------------------------------------------
    # Activity
    # ------------------------------------------------------------------
    def active(self, since: datetime = LONG_AGO) -> "EntityBuilder":
        return self._append("activations", Period(since))

    def future_activated(self, starts: Optional[datetime] = None) -> "EntityBuilder":
        starts = starts or datetime.now() + timedelta(days=30)
        return self._append("activations", Period(starts))

    def inactive(self, since: datetime = LONG_AGO, ended: Optional[datetime] = None) -> "EntityBuilder":
        return self._append("activations", Period(since, ended or since + timedelta(days=365)))

    # ------------------------------------------------------------------
    # Relationships
    # ------------------------------------------------------------------
    def _with_members(self, field: str, members, since: datetime) -> "EntityBuilder":
        links = []
        for item in members:
            member = _snapshot(item)
            member = replace(member, memberships=member.memberships + (Membership(self.entity.key, since),))
            links.append(Membership(member.key, since, member=member))
        return self._append(field, *links)

    def with_wrestlers(self, *wrestlers, since: datetime = LONG_AGO) -> "EntityBuilder":
        """Add current wrestler members, recording the membership on both sides."""
        return self._with_members("wrestlers", wrestlers, since)

    def with_tag_teams(self, *tag_teams, since: datetime = LONG_AGO) -> "EntityBuilder":
        return self._with_members("tag_teams", tag_teams, since)

    def managed_by(self, *managers, since: datetime = LONG_AGO) -> "EntityBuilder":
        keys = [_snapshot(m).key for m in managers]
        return self._append("managers", *(Membership(key, since) for key in keys))

    def champion_of(self, title, since: datetime = LONG_AGO) -> "EntityBuilder":
        """Hold *title* (a name, builder or snapshot) from *since*."""
        name = title if isinstance(title, str) else _snapshot(title).name
        return self._append("championships", Championship(name, self.entity.key, since))

    def held_by(self, champion, since: datetime = LONG_AGO) -> "EntityBuilder":
        """Title side of a reign: *champion* holds this title from *since*."""
        key = champion if isinstance(champion, str) else _snapshot(champion).key
        return self._append("championships", Championship(self.entity.name, key, since))

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------
    def deleted(self, at: datetime = LONG_AGO) -> "EntityBuilder":
        return self._with(deleted_at=at)

    def restricted(self, **flags) -> "EntityBuilder":
        """Set :class:`~ringside.periods.Restrictions` fields, e.g. ``in_treatment=True``."""
        return self._with(restrictions=replace(self.entity.restrictions, **flags))

    def build(self):
        return self.entity


def wrestler(name: str) -> EntityBuilder:
    return EntityBuilder(Wrestler(name))


def manager(name: str) -> EntityBuilder:
    return EntityBuilder(Manager(name))


def referee(name: str) -> EntityBuilder:
    return EntityBuilder(Referee(name))


def tag_team(name: str) -> EntityBuilder:
    return EntityBuilder(TagTeam(name))


def stable(name: str) -> EntityBuilder:
    return EntityBuilder(Stable(name))


def title(name: str) -> EntityBuilder:
    return EntityBuilder(Title(name))
