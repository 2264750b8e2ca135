# どこで: `src/ghxsync/runtime/slider_sync.py`。
# 何を: GraphRegistry のイベントを購読して SliderLinker を作り直し、値変更を各グラフへ配る。
# なぜ: reconcile を「グラフ集合が変わった瞬間」に同期実行し、写像が常に最新の集合で行われるようにするため。

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from ghxsync.core.graph_registry import (
    ACTIVE_GRAPH_CHANGED,
    GRAPH_ADDED,
    GRAPH_REMOVED,
    GRAPH_UPDATED,
    GraphEvent,
    GraphRegistry,
    NormalizedGraph,
)
from ghxsync.core.sliders import GraphSource, MappedValue, SliderGroupView, SliderLinker, SliderUpdate

_logger = logging.getLogger(__name__)

SliderProvider = Callable[[NormalizedGraph], list[Any]]
ApplyUpdate = Callable[[SliderUpdate], Any]

_EVENTS = (GRAPH_ADDED, GRAPH_UPDATED, GRAPH_REMOVED, ACTIVE_GRAPH_CHANGED)


def _is_slider_node(node: Mapping[str, Any]) -> bool:
    for key in ("type", "kind"):
        value = node.get(key)
        if isinstance(value, str) and value.strip().casefold() == "slider":
            return True
    return False


def sliders_from_graph(graph: NormalizedGraph) -> list[dict[str, Any]]:
    """graph の slider ノードを RawSlider 形式の dict 列にして返す。

    Notes
    -----
    ノード自身のフィールドに `state`（実行時の値/レンジ）を上書きした dict を返す。
    `nodeId` が無ければノードの `id` を使う。
    """

    sliders: list[dict[str, Any]] = []
    for node in graph.nodes:
        if not isinstance(node, Mapping) or not _is_slider_node(node):
            continue
        raw = {k: v for k, v in node.items() if k != "state"}
        state = node.get("state")
        if isinstance(state, Mapping):
            raw.update(state)
        if "nodeId" not in raw and "id" in node:
            raw["nodeId"] = node["id"]
        sliders.append(raw)
    return sliders


class SliderSync:
    """GraphRegistry と SliderLinker を結ぶ同期セッション。

    Notes
    -----
    - 購読した全イベントで `reconcile()` を同期実行する（イベントの配送中に完了する）。
    - `set_value()` は `map_value()` の結果を 1 件ずつ `apply_update` へ渡す。
    - `close()` 後はイベントを受け取らない。
    """

    def __init__(
        self,
        registry: GraphRegistry,
        *,
        linker: SliderLinker,
        apply_update: ApplyUpdate,
        slider_provider: SliderProvider = sliders_from_graph,
    ) -> None:
        if not isinstance(registry, GraphRegistry):
            raise TypeError(f"registry は GraphRegistry である必要があります: got={registry!r}")
        if not isinstance(linker, SliderLinker):
            raise TypeError(f"linker は SliderLinker である必要があります: got={linker!r}")
        if not callable(apply_update):
            raise TypeError(f"apply_update は callable である必要があります: got={apply_update!r}")
        if not callable(slider_provider):
            raise TypeError(f"slider_provider は callable である必要があります: got={slider_provider!r}")

        self._registry = registry
        self._linker = linker
        self._apply_update = apply_update
        self._slider_provider = slider_provider
        self._unsubscribers = [registry.on(event, self._on_event) for event in _EVENTS]
        self.refresh()

    @property
    def linker(self) -> SliderLinker:
        return self._linker

    def _on_event(self, event: GraphEvent) -> None:
        _logger.debug("slider sync: registry event id=%s", event.id)
        self.refresh()

    def refresh(self) -> None:
        """レジストリの現在のグラフ集合から reconcile をやり直す。"""

        sources = [
            GraphSource(
                graph_id=entry.id,
                metadata=entry.metadata,
                sliders=list(self._slider_provider(entry.graph)),
            )
            for entry in self._registry.list_graphs()
        ]
        self._linker.reconcile(sources, active_graph_id=self._registry.active_graph_id)

    def groups(self) -> list[SliderGroupView]:
        return self._linker.list()

    def set_value(self, group_id: str, value: Any) -> MappedValue | None:
        """group_id のグループへ基準スケールの値を設定し、各メンバーへ配る。

        Returns
        -------
        MappedValue | None
            配った結果。group_id が未知なら None（apply_update は呼ばない）。
        """

        mapped = self._linker.map_value(group_id, value)
        if mapped is None:
            return None
        for update in mapped.updates:
            self._apply_update(update)
        return mapped

    def close(self) -> None:
        """レジストリの購読を解除する（複数回呼んでもよい）。"""

        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()


__all__ = ["SliderProvider", "ApplyUpdate", "SliderSync", "sliders_from_graph"]
