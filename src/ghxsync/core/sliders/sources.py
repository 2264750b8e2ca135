# どこで: `src/ghxsync/core/sliders/sources.py`。
# 何を: グラフソース（graph_id / metadata / sliders）を読み取り専用スナップショットへ写す。
# なぜ: reconcile 後に呼び出し側オブジェクトへの参照を残さず、dict/属性どちらの入力も受けるため。

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Number
from typing import Any

_logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass(frozen=True, slots=True)
class SliderSnapshot:
    """1 スライダー分の生値のコピー（数値化はしない）。"""

    node_id: str | None
    nick_name: str | None
    label: str | None
    min: Any = None
    max: Any = None
    step: Any = None
    value: Any = None
    has_value: bool = False


@dataclass(frozen=True, slots=True)
class GraphMetadata:
    """canonical 選出と表示に使うグラフのメタ情報。"""

    label: str | None = None
    role: str | None = None
    primary: bool = False
    priority: float | None = None


@dataclass(frozen=True, slots=True)
class GraphSource:
    """reconcile の入力 1 件（1 グラフ分）。"""

    graph_id: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    sliders: Sequence[Any] = ()


@dataclass(frozen=True, slots=True)
class SourceEntry:
    """平坦化済みのスライダー 1 件（order は 1 始まりの出現順）。"""

    graph_id: str
    metadata: GraphMetadata
    slider: SliderSnapshot
    order: int


def _field(obj: Any, *names: str) -> Any:
    """Mapping のキーまたは属性を names の順に探し、最初に見つかった値を返す。"""

    if isinstance(obj, Mapping):
        for name in names:
            if name in obj:
                return obj[name]
        return _MISSING
    for name in names:
        if hasattr(obj, name):
            return getattr(obj, name)
    return _MISSING


def _opt_text(value: Any) -> str | None:
    if value is _MISSING or value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _opt_value(value: Any) -> Any:
    return None if value is _MISSING else value


def _scalar(value: Any) -> Any:
    """数値/文字列はそのまま、それ以外は float 化を試みてコピーする（不可なら None）。"""

    if value is _MISSING or value is None:
        return None
    if isinstance(value, (str, Number)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _first_text(obj: Any, *names: str) -> str | None:
    # `??` 相当: None/欠落を飛ばして最初の値を採る。
    for name in names:
        text = _opt_text(_field(obj, name))
        if text is not None:
            return text
    return None


def snapshot_slider(slider: Any) -> SliderSnapshot:
    """RawSlider（Mapping または属性オブジェクト）からスナップショットを作る。"""

    value = _field(slider, "value")
    return SliderSnapshot(
        node_id=_first_text(slider, "nodeId", "node_id", "id"),
        nick_name=_first_text(slider, "nickName", "nickname", "nick_name"),
        label=_first_text(slider, "label", "name"),
        min=_scalar(_field(slider, "min")),
        max=_scalar(_field(slider, "max")),
        step=_scalar(_field(slider, "step")),
        value=_scalar(value),
        has_value=value is not _MISSING and value is not None,
    )


def snapshot_metadata(metadata: Any) -> GraphMetadata:
    """メタ情報 dict から GraphMetadata を作る（欠落・不正値は既定値）。"""

    if metadata is None:
        return GraphMetadata()

    primary = any(
        _field(metadata, name) is True for name in ("primary", "isPrimary", "is_primary")
    )
    raw_priority = _field(metadata, "priority")
    priority: float | None = None
    if isinstance(raw_priority, (int, float)) and not isinstance(raw_priority, bool):
        if math.isfinite(raw_priority):
            priority = float(raw_priority)

    return GraphMetadata(
        label=_first_text(metadata, "label", "name"),
        role=_opt_text(_field(metadata, "role")),
        primary=primary,
        priority=priority,
    )


def _source_parts(source: Any) -> tuple[str | None, Any, Any]:
    graph_id = _first_text(source, "graphId", "graph_id")
    metadata = _opt_value(_field(source, "metadata"))
    sliders = _opt_value(_field(source, "sliders"))
    return graph_id, metadata, sliders


def flatten_sources(sources: Iterable[Any] | None) -> list[SourceEntry]:
    """sources をソース順→スライダー順に平坦化して返す。

    Notes
    -----
    graph_id が無い、または sliders が列でないソースはスキップする（例外にしない）。
    """

    entries: list[SourceEntry] = []
    if sources is None:
        return entries

    order = 0
    for index, source in enumerate(sources):
        if source is None:
            continue
        graph_id, metadata, sliders = _source_parts(source)
        if not graph_id:
            _logger.warning("graph_id の無いソースをスキップします: index=%d", index)
            continue
        if isinstance(sliders, (str, bytes)) or not isinstance(sliders, Sequence):
            _logger.warning("sliders が列ではないソースをスキップします: graph_id=%s", graph_id)
            continue

        meta = snapshot_metadata(metadata)
        for slider in sliders:
            if slider is None:
                continue
            order += 1
            entries.append(
                SourceEntry(
                    graph_id=graph_id,
                    metadata=meta,
                    slider=snapshot_slider(slider),
                    order=order,
                )
            )
    return entries


__all__ = [
    "SliderSnapshot",
    "GraphMetadata",
    "GraphSource",
    "SourceEntry",
    "snapshot_slider",
    "snapshot_metadata",
    "flatten_sources",
]
