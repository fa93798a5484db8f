"""
ringside.roster
===============

An in-memory roster that stores entity snapshots keyed by their entity
key (``"wrestler:jey-uso"``) and applies accepted changes atomically.

It is the reference persistence collaborator: it feeds guards with
hydrated snapshots, writes every op of a :class:`PeriodChange` or none of
them, and keeps names unique per entity type.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from pydantic import BaseModel, field_validator

from .changes import Outcome, PeriodChange, apply_to
from .lifecycle import handle as run_guard
from .models import RosterMemberType
from .periods import InvariantViolation
from .relationships import MembershipGraph
from .rejections import Action
from .settings import STRICT_ROSTER
from .status import moment, status

logger = logging.getLogger(__name__)

# Plain period collections that may hold at most one open period.
_PERIOD_FIELDS = ("employments", "suspensions", "injuries", "retirements", "activations")


class TransitionRequest(BaseModel):
    """A caller asking for *action* on the entity keyed *entity*."""
    entity: str
    action: Action
    effective_at: Optional[datetime] = None

    @field_validator("action", mode="before")
    @classmethod
    def _parse_action(cls, value):
        return Action.parse(value)


class Roster:
    """
    Dictionary-backed store of roster snapshots.

    Example
    -------
    >>> from ringside.builders import wrestler
    >>> roster = Roster([wrestler("Jey Uso").employed().build()])
    >>> roster.handle("wrestler:jey-uso", "suspend").ok
    True
    """

    def __init__(self, entities: Iterable = (), strict: bool = STRICT_ROSTER) -> None:
        self._entities: Dict[str, object] = {}
        self.strict = strict
        for entity in entities:
            self.add(entity)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _hydrate(self, entity, store: Dict[str, object]):
        """Swap embedded member snapshots for the stored ones."""
        for field in ("wrestlers", "tag_teams"):
            links = getattr(entity, field, None)
            if not links:
                continue
            fresh = tuple(
                link.with_member(self._hydrate(store[link.key], store)) if link.key in store else link
                for link in links
            )
            entity = replace(entity, **{field: fresh})
        return entity

    def _taken(self, member_type: RosterMemberType, skip: Optional[str] = None) -> List[str]:
        return [e.name for e in self if e.member_type is member_type and e.key != skip and not e.is_deleted]

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def add(self, entity) -> None:
        """
        Insert or overwrite a snapshot.  Embedded member snapshots are
        registered too unless their key is already stored.
        """
        self._entities[entity.key] = entity
        for field in ("wrestlers", "tag_teams"):
            for link in getattr(entity, field, ()):
                if link.member is not None and link.key not in self._entities:
                    self.add(link.member)

    def get(self, key: str):
        """Retrieve a hydrated snapshot by key (raise KeyError if not present)."""
        return self._hydrate(self._entities[key], self._entities)

    def find_by_status(self, wanted, at: Optional[datetime] = None) -> list:
        """Return all entities whose derived status is *wanted* at *at*."""
        at = moment(at)
        return [e for e in (self.get(k) for k in self._entities) if status(e, at) == wanted]

    def names(self, member_type: RosterMemberType) -> List[str]:
        """Names of the live (not deleted) entities of *member_type*."""
        return self._taken(member_type)

    def handle(self, key: str, action, at: Optional[datetime] = None, **options) -> Outcome:
        """
        Run the guard for *action* on the entity keyed *key* and, when it
        is accepted, apply the change.
        """
        entity = self.get(key)
        action = Action.parse(action)
        if action is Action.RESTORE:
            options.setdefault("taken_names", self._taken(entity.member_type, skip=key))
        elif action is Action.SPLIT:
            options.setdefault("taken_names", self._taken(RosterMemberType.STABLE))
        outcome = run_guard(entity, action, at, **options)
        if outcome.ok:
            self.apply(outcome.change)
        else:
            logger.info(f"{action} on {key} rejected: {outcome.rejection.message}")
        return outcome

    def transition(self, request: TransitionRequest) -> Outcome:
        return self.handle(request.entity, request.action, request.effective_at)

    def split_stable(
        self,
        key: str,
        new_name: str,
        wrestlers: Sequence[str] = (),
        tag_teams: Sequence[str] = (),
        at: Optional[datetime] = None,
    ) -> Outcome:
        return self.handle(key, Action.SPLIT, at, new_name=new_name, wrestlers=wrestlers, tag_teams=tag_teams)

    def add_members(
        self,
        key: str,
        wrestlers: Sequence[str] = (),
        tag_teams: Sequence[str] = (),
        at: Optional[datetime] = None,
    ) -> Outcome:
        return self.handle(
            key,
            Action.ADD_MEMBERS,
            at,
            wrestlers=[self.get(k) for k in wrestlers],
            tag_teams=[self.get(k) for k in tag_teams],
        )

    def remove_members(self, key: str, members: Sequence[str], at: Optional[datetime] = None) -> Outcome:
        return self.handle(key, Action.REMOVE_MEMBERS, at, members=members)

    def apply(self, change: PeriodChange) -> None:
        """
        Write *change*.  Every target is updated or, if any op fails, none
        is; :class:`InvariantViolation` propagates to the caller.
        """
        staged = dict(self._entities)
        for created in change.created:
            if created.key in staged:
                raise InvariantViolation(f"{created.key} already exists")
            staged[created.key] = created
        for key in change.targets:
            if key not in staged:
                raise InvariantViolation(f"{change.action} change targets unknown entity {key}")
            staged[key] = apply_to(staged[key], change, nested=False)

        if self.strict:
            self._validate(staged, change.at)
        self._entities = staged
        logger.info(f"applied {change.action} on {change.subject}: {len(change.ops)} op(s) across {len(change.targets)} entities")

    def graph(self, at: Optional[datetime] = None) -> MembershipGraph:
        return MembershipGraph.from_entities(self._entities.values(), at)

    def validate(self, at: Optional[datetime] = None) -> None:
        """Raise :class:`InvariantViolation` if the stored snapshots are inconsistent."""
        self._validate(self._entities, moment(at))

    def _validate(self, store: Dict[str, object], at: datetime) -> None:
        for entity in store.values():
            for field in _PERIOD_FIELDS:
                open_periods = [p for p in getattr(entity, field, ()) if p.ended_at is None]
                if len(open_periods) > 1:
                    raise InvariantViolation(f"{entity.key} has {len(open_periods)} open {field}")
        clashes = MembershipGraph.from_entities(store.values(), at).conflicts()
        if clashes:
            member, groups = clashes[0]
            raise InvariantViolation(f"{member} is in {', '.join(groups)} at once")

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __iter__(self):
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, key: str) -> bool:
        return key in self._entities
