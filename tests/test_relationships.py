"""
tests/test_relationships.py
===========================

Unit tests for ringside.relationships.MembershipGraph
"""

from datetime import datetime

from ringside.builders import manager, stable, tag_team, wrestler
from ringside.relationships import MembershipGraph
from ringside.roster import Roster

T0 = datetime(2020, 1, 1)
NOW = datetime(2024, 6, 1)


def _demo_graph():
    mg = MembershipGraph()
    mg.link("stable:the-bloodline", "wrestler:solo-sikoa")
    mg.link("stable:the-bloodline", "tag_team:the-usos")
    mg.link("tag_team:the-usos", "wrestler:jey-uso")
    mg.link("tag_team:the-usos", "wrestler:jimmy-uso")
    mg.manage("manager:paul-heyman", "wrestler:jey-uso")
    return mg


def test_members_and_groups():
    mg = _demo_graph()
    assert mg.members("stable:the-bloodline") == ["tag_team:the-usos", "wrestler:solo-sikoa"]
    assert mg.groups("wrestler:jey-uso") == ["tag_team:the-usos"]
    assert mg.members("stable:nobody") == []


def test_stable_of_through_tag_team():
    mg = _demo_graph()
    assert mg.stable_of("wrestler:solo-sikoa") == "stable:the-bloodline"
    assert mg.stable_of("wrestler:jey-uso") == "stable:the-bloodline"
    assert mg.stable_of("manager:paul-heyman") is None


def test_all_wrestlers_recurses():
    assert _demo_graph().all_wrestlers("stable:the-bloodline") == [
        "wrestler:jey-uso",
        "wrestler:jimmy-uso",
        "wrestler:solo-sikoa",
    ]


def test_stable_managers_are_derived():
    """Managers reach a stable only through who they manage."""
    mg = _demo_graph()
    assert mg.stable_managers("stable:the-bloodline") == ["manager:paul-heyman"]
    assert "manager:paul-heyman" not in mg.members("stable:the-bloodline")


def test_conflicts():
    mg = MembershipGraph()
    mg.link("stable:a", "wrestler:x")
    mg.link("stable:b", "wrestler:x")
    mg.link("tag_team:t", "wrestler:x")
    assert mg.conflicts() == [("wrestler:x", ["stable:a", "stable:b"])]
    assert _demo_graph().conflicts() == []


def test_from_entities():
    heyman = manager("Paul Heyman").employed(T0)
    usos = tag_team("The Usos").employed(T0).with_wrestlers(
        wrestler("Jey Uso").employed(T0).managed_by(heyman), wrestler("Jimmy Uso").employed(T0)
    )
    s = stable("The Bloodline").active(T0).with_tag_teams(usos).build()
    roster = Roster([s, heyman.build()])
    mg = roster.graph(NOW)
    assert mg.stable_of("wrestler:jimmy-uso") == "stable:the-bloodline"
    assert mg.stable_managers("stable:the-bloodline") == ["manager:paul-heyman"]
    assert mg.g.nodes["wrestler:jey-uso"]["name"] == "Jey Uso"
