from __future__ import annotations

import itertools

import pytest

from ghxsync.core.sliders.election import elect_canonical, should_replace_canonical
from ghxsync.core.sliders.sources import GraphMetadata, SliderSnapshot, SourceEntry


def _entry(
    graph_id: str,
    order: int,
    *,
    role: str | None = None,
    primary: bool = False,
    priority: float | None = None,
) -> SourceEntry:
    return SourceEntry(
        graph_id=graph_id,
        metadata=GraphMetadata(label=None, role=role, primary=primary, priority=priority),
        slider=SliderSnapshot(node_id=f"{graph_id}-n", nick_name="Radius", label=None),
        order=order,
    )


def _elect(candidates, *, active=None):
    return elect_canonical(candidates, primary_role="wireframe", active_graph_id=active)


def test_primary_role_wins_over_everything_else():
    wire = _entry("wire", 3, role="Wireframe")
    flagged = _entry("flagged", 1, primary=True, priority=0)

    assert _elect([flagged, wire], active="flagged") is wire


def test_primary_flag_wins_over_active_graph():
    flagged = _entry("flagged", 2, primary=True)
    active = _entry("active", 1)

    assert _elect([active, flagged], active="active") is flagged


def test_active_graph_wins_over_priority():
    prioritized = _entry("prio", 1, priority=0)
    active = _entry("active", 2)

    assert _elect([prioritized, active], active="active") is active


def test_lower_priority_wins_and_present_priority_beats_absent():
    low = _entry("low", 3, priority=1)
    high = _entry("high", 1, priority=5)
    none = _entry("none", 2)

    assert _elect([high, none, low]) is low
    assert _elect([none, high]) is high


def test_order_breaks_remaining_ties():
    first = _entry("a", 1)
    second = _entry("b", 2)

    assert _elect([second, first]) is first
    assert _elect([first, second]) is first


def test_election_does_not_depend_on_iteration_order():
    entries = [
        _entry("a", 1, priority=3),
        _entry("b", 2),
        _entry("c", 3, priority=2),
        _entry("d", 4),
    ]
    winners = {_elect(list(p)).graph_id for p in itertools.permutations(entries)}

    assert winners == {"c"}


def test_should_replace_when_current_is_missing():
    assert should_replace_canonical(
        None, _entry("a", 1), primary_role="wireframe", active_graph_id=None
    )


def test_elect_canonical_requires_candidates():
    with pytest.raises(ValueError):
        _elect([])
