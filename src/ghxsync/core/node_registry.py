# どこで: `src/ghxsync/core/node_registry.py`。
# 何を: ノード id（GUID + 別名）から評価可能な NodeDescriptor を引くレジストリを提供する。
# なぜ: グラフ評価側がピン名の揺れ（大文字小文字・英語ラベル）を意識せずにノードを呼べるようにするため。

from __future__ import annotations

import logging
from collections.abc import ItemsView, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Callable

_logger = logging.getLogger(__name__)

NodeEval = Callable[[Mapping[str, Any]], dict[str, Any]]


@dataclass(frozen=True, slots=True)
class PinMap:
    """外部ピン名 -> 正規引数名（inputs）/ 正規出力名（outputs）の対応。"""

    inputs: Mapping[str, str] = field(default_factory=dict)
    outputs: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NodeDescriptor:
    """評価可能なノードの定義。

    Notes
    -----
    `evaluate` は正規引数名 -> 生の入力値の dict を受け取り、
    正規出力名 -> 値の dict を返す。
    """

    type: str
    pin_map: PinMap
    evaluate: NodeEval


def _lookup_key(name: str) -> str:
    """大文字小文字と GUID の波括弧を無視した検索キーを返す。"""

    text = str(name).strip().casefold()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1]
    return text


class NodeRegistry:
    """ノード id と NodeDescriptor を対応付けるレジストリ。

    Notes
    -----
    `register(ids, descriptor)` の ids は先頭が正規 id、残りが別名。
    同じ id の再登録は上書きする。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[str, NodeDescriptor] = {}
        self._canonical: dict[str, str] = {}
        self._by_lookup_key: dict[str, str] = {}

    def register(self, ids: Sequence[str] | str, descriptor: NodeDescriptor) -> None:
        """descriptor を ids の全てで引けるように登録する。"""

        if isinstance(ids, str):
            ids = [ids]
        names = [str(i) for i in ids if str(i).strip()]
        if not names:
            raise ValueError("ノード登録には 1 つ以上の id が必要です")
        if not isinstance(descriptor, NodeDescriptor):
            raise TypeError(f"descriptor は NodeDescriptor である必要があります: got={descriptor!r}")

        canonical = names[0]
        for name in names:
            self._items[name] = descriptor
            self._canonical[name] = canonical
            self._by_lookup_key[_lookup_key(name)] = name
        _logger.debug("node registered: %s (aliases=%d)", canonical, len(names) - 1)

    def _resolve(self, name: str) -> str | None:
        if name in self._items:
            return name
        return self._by_lookup_key.get(_lookup_key(name))

    def lookup(self, name: str) -> NodeDescriptor | None:
        """name（id/別名、大文字小文字・波括弧は無視）の NodeDescriptor を返す。未登録なら None。"""

        resolved = self._resolve(name)
        return self._items[resolved] if resolved is not None else None

    def get(self, name: str) -> NodeDescriptor:
        """name に対応する NodeDescriptor を取得する。

        Raises
        ------
        KeyError
            未登録の name が指定された場合。
        """

        descriptor = self.lookup(name)
        if descriptor is None:
            raise KeyError(f"未登録のノードです: {name!r}")
        return descriptor

    def canonical_id(self, name: str) -> str | None:
        """name が属する登録の正規 id を返す。未登録なら None。"""

        resolved = self._resolve(name)
        return self._canonical[resolved] if resolved is not None else None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._resolve(name) is not None

    def __getitem__(self, name: str) -> NodeDescriptor:
        return self.get(name)

    def items(self) -> ItemsView[str, NodeDescriptor]:
        """登録済みエントリの (id, descriptor) ビューを返す（別名も含む）。"""
        return self._items.items()

    def evaluate(self, name: str, pin_values: Mapping[str, Any]) -> dict[str, Any]:
        """外部ピン名で入力を受け取り、ノードを評価して外部出力名で返す。

        Notes
        -----
        pin_map.inputs に無いピン名は正規引数名としてそのまま渡す。
        出力は正規出力名ごとに、pin_map.outputs で最初に対応付けられた外部名を使う。
        """

        descriptor = self.get(name)
        inputs: dict[str, Any] = {}
        for pin, value in pin_values.items():
            inputs[descriptor.pin_map.inputs.get(pin, pin)] = value

        result = descriptor.evaluate(inputs)

        output_names: dict[str, str] = {}
        for pin, canonical in descriptor.pin_map.outputs.items():
            output_names.setdefault(canonical, pin)
        return {output_names.get(key, key): value for key, value in result.items()}


node_registry = NodeRegistry()
"""グローバルなノードレジストリインスタンス。"""


__all__ = ["NodeEval", "PinMap", "NodeDescriptor", "NodeRegistry", "node_registry"]
