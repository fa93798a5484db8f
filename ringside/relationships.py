"""
ringside.relationships
======================

Group → member and manager → managed graph built on NetworkX.

Only *current* links are loaded, so the graph answers "who is with whom
right now": which stable a wrestler is in (directly or through a tag
team), every wrestler a stable fields, and which managers work for a
stable through its members.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

import networkx as nx

from .models import RosterMemberType, key_type
from .status import current_managers, moment

MEMBER = "member"
MANAGES = "manages"


class MembershipGraph:
    """
    Lightweight wrapper around a DiGraph whose edges are tagged with a
    ``kind`` (``"member"`` or ``"manages"``).

    Example
    -------
    >>> mg = MembershipGraph()
    >>> mg.link("stable:the-bloodline", "wrestler:jey-uso")
    >>> mg.link("tag_team:the-usos", "wrestler:jey-uso")
    >>> mg.groups("wrestler:jey-uso")
    ['stable:the-bloodline', 'tag_team:the-usos']
    """

    def __init__(self) -> None:
        self.g = nx.DiGraph()

    @classmethod
    def from_entities(cls, entities: Iterable, at: Optional[datetime] = None) -> "MembershipGraph":
        """Load the current links of every snapshot in *entities*."""
        at = moment(at)
        mg = cls()
        for entity in entities:
            mg._add_node(entity.key, entity.name)
            for field in ("wrestlers", "tag_teams"):
                for link in getattr(entity, field, ()):
                    if link.is_current(at):
                        mg.link(entity.key, link.key, since=link.joined_at)
            for link in getattr(entity, "memberships", ()):
                if link.is_current(at):
                    mg.link(link.key, entity.key, since=link.joined_at)
            for manager in current_managers(entity, at):
                mg.manage(manager, entity.key)
        return mg

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------
    def _add_node(self, key: str, name: Optional[str] = None) -> None:
        if key not in self.g:
            self.g.add_node(key, type=key_type(key), name=name or key.partition(":")[2])
        elif name:
            self.g.nodes[key]["name"] = name

    def link(self, group: str, member: str, since: Optional[datetime] = None) -> None:
        """Add a membership edge group → member."""
        self._add_node(group)
        self._add_node(member)
        self.g.add_edge(group, member, kind=MEMBER, since=since)

    def manage(self, manager: str, managed: str) -> None:
        self._add_node(manager)
        self._add_node(managed)
        self.g.add_edge(manager, managed, kind=MANAGES)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def _successors(self, key: str, kind: str) -> List[str]:
        if key not in self.g:
            return []
        return sorted(n for n in self.g.successors(key) if self.g.edges[key, n]["kind"] == kind)

    def _predecessors(self, key: str, kind: str) -> List[str]:
        if key not in self.g:
            return []
        return sorted(n for n in self.g.predecessors(key) if self.g.edges[n, key]["kind"] == kind)

    def members(self, group: str) -> List[str]:
        """Direct current members of *group*."""
        return self._successors(group, MEMBER)

    def groups(self, member: str) -> List[str]:
        """Groups *member* currently belongs to directly."""
        return self._predecessors(member, MEMBER)

    def managers(self, key: str) -> List[str]:
        return self._predecessors(key, MANAGES)

    def stable_of(self, key: str) -> Optional[str]:
        """
        The stable *key* is in, directly or (for a wrestler) through its
        tag team.
        """
        for group in self.groups(key):
            if key_type(group) is RosterMemberType.STABLE:
                return group
        for group in self.groups(key):
            if key_type(group) is RosterMemberType.TAG_TEAM:
                found = self.stable_of(group)
                if found:
                    return found
        return None

    def all_wrestlers(self, group: str) -> List[str]:
        """Every wrestler fielded by *group*, including those in its tag teams."""
        found = set()
        for member in self.members(group):
            kind = key_type(member)
            if kind is RosterMemberType.WRESTLER:
                found.add(member)
            elif kind is RosterMemberType.TAG_TEAM:
                found.update(self.all_wrestlers(member))
        return sorted(found)

    def stable_managers(self, stable: str) -> List[str]:
        """
        Managers attached to *stable* through the wrestlers and tag teams
        they manage; managers are never direct stable members.
        """
        managed = set(self.members(stable)) | set(self.all_wrestlers(stable))
        found = set()
        for key in managed:
            found.update(self.managers(key))
        return sorted(found)

    def conflicts(self) -> List[Tuple[str, List[str]]]:
        """
        Members currently in more than one group of the same type, e.g. a
        wrestler in two stables at once.
        """
        clashes = []
        for node in sorted(self.g.nodes):
            by_type: Dict[RosterMemberType, List[str]] = {}
            for group in self.groups(node):
                by_type.setdefault(key_type(group), []).append(group)
            for groups in by_type.values():
                if len(groups) > 1:
                    clashes.append((node, groups))
        return clashes
