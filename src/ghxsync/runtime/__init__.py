# どこで: `src/ghxsync/runtime/__init__.py`。
# 何を: グラフレジストリとスライダー連携をつなぐ実行時セッションの公開エイリアス。
# なぜ: core 側（純粋な計算）とイベント配線を分け、core が runtime に依存しないようにするため。

from __future__ import annotations

from .slider_sync import SliderSync, sliders_from_graph

__all__ = ["SliderSync", "sliders_from_graph"]
