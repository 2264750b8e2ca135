from __future__ import annotations

import logging

import pytest

from ghxsync.core.graph_registry import (
    ACTIVE_GRAPH_CHANGED,
    GRAPH_ADDED,
    GRAPH_REMOVED,
    GRAPH_UPDATED,
    EventEmitter,
    GraphEvent,
    GraphRegistry,
    normalize_graph,
)


def _recorder(registry: GraphRegistry) -> list[tuple[str, str | None]]:
    events: list[tuple[str, str | None]] = []
    for name in (GRAPH_ADDED, GRAPH_UPDATED, GRAPH_REMOVED, ACTIVE_GRAPH_CHANGED):
        registry.on(name, lambda event, name=name: events.append((name, event.id)))
    return events


def test_register_graph_assigns_sequential_ids_per_registry():
    registry = GraphRegistry()

    first, status = registry.register_graph({"nodes": [1], "wires": []})
    second, _ = registry.register_graph({"nodes": []}, prefix="ghx")

    assert status == "added"
    assert first.id == "graph-1"
    assert second.id == "ghx-2"
    assert GraphRegistry().register_graph({})[0].id == "graph-1"


def test_register_graph_uses_explicit_or_embedded_id_and_updates():
    registry = GraphRegistry()
    events = _recorder(registry)

    entry, status = registry.register_graph({"id": "g", "nodes": [{"id": "n"}]})
    assert (entry.id, status) == ("g", "added")

    updated, status = registry.register_graph({"nodes": []}, id="g", metadata={"role": "wireframe"})
    assert status == "updated"
    assert updated.added_at == entry.added_at
    assert updated.updated_at >= entry.updated_at
    assert updated.graph.nodes == ()
    assert events == [(GRAPH_ADDED, "g"), (GRAPH_UPDATED, "g")]


def test_metadata_is_layered_and_copied():
    registry = GraphRegistry()
    registry.register_graph(
        {"id": "g", "name": "Tower", "source": "tower.ghx", "metadata": {"role": "solid", "priority": 2}}
    )
    entry, _ = registry.register_graph({"id": "g", "metadata": {"priority": 1}}, metadata={"role": "wireframe"})

    assert entry.metadata == {"role": "wireframe", "priority": 1, "label": "Tower", "source": "tower.ghx"}

    entry.metadata["role"] = "changed"
    assert registry.get_graph("g").metadata["role"] == "wireframe"


def test_register_graph_rejects_none():
    with pytest.raises(ValueError):
        GraphRegistry().register_graph(None)


def test_normalize_graph_copies_sequences_only():
    nodes = [{"id": "a"}]
    graph = normalize_graph({"nodes": nodes, "wires": "oops"})
    nodes.append({"id": "b"})

    assert graph.nodes == ({"id": "a"},)
    assert graph.wires == ()


def test_get_and_list_graphs():
    registry = GraphRegistry()
    registry.register_graph({}, id="a")
    registry.register_graph({}, id="b")

    assert [e.id for e in registry.list_graphs()] == ["a", "b"]
    assert registry.get_graph("a").id == "a"
    assert registry.get_graph("missing") is None
    assert registry.get_graph(None) is None


def test_set_active_graph_emits_once_and_rejects_unknown():
    registry = GraphRegistry()
    registry.register_graph({}, id="a")
    events = _recorder(registry)

    assert registry.set_active_graph("a").id == "a"
    registry.set_active_graph("a")
    assert registry.active_graph_id == "a"
    assert registry.get_active_graph().id == "a"
    assert events == [(ACTIVE_GRAPH_CHANGED, "a")]

    with pytest.raises(KeyError):
        registry.set_active_graph("missing")

    assert registry.set_active_graph(None) is None
    assert registry.active_graph_id is None
    assert events[-1] == (ACTIVE_GRAPH_CHANGED, None)


def test_removing_active_graph_activates_first_remaining():
    registry = GraphRegistry()
    registry.register_graph({}, id="a")
    registry.register_graph({}, id="b")
    registry.register_graph({}, id="c")
    registry.set_active_graph("b")
    events = _recorder(registry)

    assert registry.remove_graph("b") is True
    assert registry.active_graph_id == "a"
    assert events == [(GRAPH_REMOVED, "b"), (ACTIVE_GRAPH_CHANGED, "a")]

    assert registry.remove_graph("b") is False
    assert registry.remove_graph(None) is False


def test_removing_last_active_graph_clears_active():
    registry = GraphRegistry()
    registry.register_graph({}, id="only")
    registry.set_active_graph("only")
    events = _recorder(registry)

    registry.remove_graph("only")

    assert registry.active_graph_id is None
    assert registry.get_active_graph() is None
    assert events == [(GRAPH_REMOVED, "only"), (ACTIVE_GRAPH_CHANGED, None)]


def test_listener_errors_are_logged_and_do_not_stop_delivery(caplog: pytest.LogCaptureFixture):
    emitter = EventEmitter()
    received: list[str | None] = []

    def broken(event: GraphEvent) -> None:
        raise RuntimeError("boom")

    emitter.on("x", broken)
    emitter.on("x", lambda event: received.append(event.id))

    with caplog.at_level(logging.ERROR, logger="ghxsync.core.graph_registry"):
        emitter.emit("x", GraphEvent(id="g"))

    assert received == ["g"]
    assert "listener failed" in caplog.text


def test_unsubscribe_stops_delivery():
    registry = GraphRegistry()
    received: list[str | None] = []
    unsubscribe = registry.on(GRAPH_ADDED, lambda event: received.append(event.id))

    registry.register_graph({}, id="a")
    unsubscribe()
    unsubscribe()
    registry.register_graph({}, id="b")

    assert received == ["a"]


def test_on_rejects_non_callable_listener():
    with pytest.raises(TypeError):
        GraphRegistry().on(GRAPH_ADDED, "nope")  # type: ignore[arg-type]
