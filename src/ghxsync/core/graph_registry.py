# どこで: `src/ghxsync/core/graph_registry.py`。
# 何を: 読み込んだグラフを id で保持し、追加/更新/削除/アクティブ切替をイベントで通知するレジストリ。
# なぜ: スライダー連携が「どのグラフがあり、どれがアクティブか」を一箇所から購読できるようにするため。

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

_logger = logging.getLogger(__name__)

GRAPH_ADDED = "graph-added"
GRAPH_UPDATED = "graph-updated"
GRAPH_REMOVED = "graph-removed"
ACTIVE_GRAPH_CHANGED = "active-graph-changed"

Listener = Callable[["GraphEvent"], None]
RegisterStatus = Literal["added", "updated"]


@dataclass(frozen=True, slots=True)
class NormalizedGraph:
    """nodes / wires だけを持つ正規化済みグラフ。"""

    nodes: tuple[Any, ...] = ()
    wires: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class GraphEntry:
    """レジストリが保持する 1 グラフ分の登録情報。"""

    id: str
    graph: NormalizedGraph
    metadata: dict[str, Any]
    added_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class GraphEvent:
    """リスナーへ渡すイベント（id が None ならアクティブ解除）。"""

    id: str | None
    graph: NormalizedGraph | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


def normalize_graph(graph: Any) -> NormalizedGraph:
    """graph の nodes / wires を tuple にコピーする（列でなければ空）。"""

    def _items(name: str) -> tuple[Any, ...]:
        if isinstance(graph, Mapping):
            value = graph.get(name)
        else:
            value = getattr(graph, name, None)
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return ()
        return tuple(value)

    return NormalizedGraph(nodes=_items("nodes"), wires=_items("wires"))


def _graph_field(graph: Any, name: str) -> Any:
    if isinstance(graph, Mapping):
        return graph.get(name)
    return getattr(graph, name, None)


def _clone_metadata(metadata: Any) -> dict[str, Any]:
    if isinstance(metadata, Mapping):
        return dict(metadata)
    return {}


class EventEmitter:
    """イベント名ごとにリスナー列を持つ同期エミッタ。

    Notes
    -----
    1 つのリスナーが例外を投げても、ログに残して残りのリスナーへの配送を続ける。
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """listener を登録し、登録解除用の関数を返す。"""

        if not callable(listener):
            raise TypeError(f"listener は callable である必要があります: got={listener!r}")
        listeners = self._listeners.setdefault(str(event), [])
        if listener not in listeners:
            listeners.append(listener)

        def unsubscribe() -> None:
            current = self._listeners.get(str(event))
            if current is not None and listener in current:
                current.remove(listener)

        return unsubscribe

    def emit(self, event: str, payload: GraphEvent) -> None:
        for listener in list(self._listeners.get(str(event), ())):
            try:
                listener(payload)
            except Exception:
                _logger.exception("graph registry listener failed: event=%s", event)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(str(event), ()))


class GraphRegistry:
    """グラフの登録・取得・削除とアクティブグラフの管理を行う。"""

    def __init__(self) -> None:
        self._graphs: dict[str, GraphEntry] = {}
        self._active_graph_id: str | None = None
        self._events = EventEmitter()
        self._counter = 0
        self._lock = threading.RLock()

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """event のリスナーを登録する。戻り値を呼ぶと登録解除する。"""

        return self._events.on(event, listener)

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def _copy(self, entry: GraphEntry) -> GraphEntry:
        return GraphEntry(
            id=entry.id,
            graph=entry.graph,
            metadata=dict(entry.metadata),
            added_at=entry.added_at,
            updated_at=entry.updated_at,
        )

    def register_graph(
        self,
        graph: Any,
        *,
        id: str | None = None,
        metadata: Mapping[str, Any] | None = None,
        prefix: str = "graph",
    ) -> tuple[GraphEntry, RegisterStatus]:
        """graph を登録（既存 id なら更新）して (entry, status) を返す。

        Notes
        -----
        メタ情報は「既存 → graph.metadata → 引数 metadata」の順に重ねる。
        label が無ければ graph の label/name、source が無ければ graph の source（str のみ）で補う。

        Raises
        ------
        ValueError
            graph が None の場合。
        """

        if graph is None:
            raise ValueError("graph が指定されていません")

        with self._lock:
            normalized = normalize_graph(graph)
            graph_id = id if id is not None else _graph_field(graph, "id")
            if graph_id is None:
                graph_id = self._next_id(prefix)
            graph_id = str(graph_id)

            previous = self._graphs.get(graph_id)
            combined: dict[str, Any] = {}
            if previous is not None:
                combined.update(previous.metadata)
            combined.update(_clone_metadata(_graph_field(graph, "metadata")))
            combined.update(_clone_metadata(metadata))

            inferred_label = _graph_field(graph, "label") or _graph_field(graph, "name")
            if inferred_label and not combined.get("label"):
                combined["label"] = inferred_label
            source = _graph_field(graph, "source")
            if isinstance(source, str) and not combined.get("source"):
                combined["source"] = source

            now = datetime.now(timezone.utc)
            entry = GraphEntry(
                id=graph_id,
                graph=normalized,
                metadata=combined,
                added_at=previous.added_at if previous is not None else now,
                updated_at=now,
            )
            self._graphs[graph_id] = entry
            status: RegisterStatus = "updated" if previous is not None else "added"

        _logger.debug("graph %s: id=%s nodes=%d", status, graph_id, len(normalized.nodes))
        event = GRAPH_UPDATED if status == "updated" else GRAPH_ADDED
        self._events.emit(event, GraphEvent(id=graph_id, graph=normalized, metadata=dict(combined)))
        return self._copy(entry), status

    def get_graph(self, graph_id: str | None) -> GraphEntry | None:
        """graph_id の登録情報（メタ情報はコピー）を返す。未登録なら None。"""

        if not graph_id:
            return None
        with self._lock:
            entry = self._graphs.get(graph_id)
            return self._copy(entry) if entry is not None else None

    def list_graphs(self) -> list[GraphEntry]:
        """登録順に全エントリ（メタ情報はコピー）を返す。"""

        with self._lock:
            return [self._copy(entry) for entry in self._graphs.values()]

    def remove_graph(self, graph_id: str | None) -> bool:
        """graph_id を削除する。削除したら True。

        アクティブグラフを削除した場合は、残りの先頭をアクティブにする（無ければ解除を通知）。
        """

        if not graph_id:
            return False
        with self._lock:
            entry = self._graphs.pop(graph_id, None)
            if entry is None:
                return False
            was_active = self._active_graph_id == graph_id
            if was_active:
                self._active_graph_id = None
            next_id = next(iter(self._graphs), None)

        _logger.debug("graph removed: id=%s", graph_id)
        self._events.emit(
            GRAPH_REMOVED,
            GraphEvent(id=graph_id, graph=entry.graph, metadata=dict(entry.metadata)),
        )
        if was_active:
            if next_id is not None:
                self.set_active_graph(next_id)
            else:
                self._events.emit(ACTIVE_GRAPH_CHANGED, GraphEvent(id=None))
        return True

    def set_active_graph(self, graph_id: str | None) -> GraphEntry | None:
        """graph_id をアクティブにする。None/空文字ならアクティブを解除する。

        Raises
        ------
        KeyError
            未登録の graph_id が指定された場合。
        """

        with self._lock:
            if not graph_id:
                if self._active_graph_id is None:
                    return None
                self._active_graph_id = None
                event = GraphEvent(id=None)
                entry = None
            else:
                entry = self._graphs.get(graph_id)
                if entry is None:
                    raise KeyError(f"未登録のグラフです: {graph_id!r}")
                if self._active_graph_id == graph_id:
                    return self._copy(entry)
                self._active_graph_id = graph_id
                event = GraphEvent(id=graph_id, graph=entry.graph, metadata=dict(entry.metadata))

        _logger.debug("active graph changed: id=%s", event.id)
        self._events.emit(ACTIVE_GRAPH_CHANGED, event)
        return self._copy(entry) if entry is not None else None

    def get_active_graph(self) -> GraphEntry | None:
        with self._lock:
            return self.get_graph(self._active_graph_id)

    @property
    def active_graph_id(self) -> str | None:
        return self._active_graph_id


__all__ = [
    "GRAPH_ADDED",
    "GRAPH_UPDATED",
    "GRAPH_REMOVED",
    "ACTIVE_GRAPH_CHANGED",
    "Listener",
    "NormalizedGraph",
    "GraphEntry",
    "GraphEvent",
    "normalize_graph",
    "EventEmitter",
    "GraphRegistry",
]
