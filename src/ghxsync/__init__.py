# どこで: `src/ghxsync/__init__.py`。
# 何を: ルート `ghxsync` パッケージを定義する。
# なぜ: import 起点を `ghxsync` に統一するため。

from __future__ import annotations

from ghxsync.core.complex import ComplexNumber, ComplexToolkit, create_complex, ensure_complex
from ghxsync.core.components import register_complex_components
from ghxsync.core.graph_registry import GraphRegistry
from ghxsync.core.node_registry import NodeRegistry, node_registry
from ghxsync.core.runtime_config import runtime_config, set_config_path
from ghxsync.core.sliders import SliderLinker
from ghxsync.runtime import SliderSync

__all__ = [
    "ComplexNumber",
    "ComplexToolkit",
    "GraphRegistry",
    "NodeRegistry",
    "SliderLinker",
    "SliderSync",
    "create_complex",
    "ensure_complex",
    "node_registry",
    "register_complex_components",
    "runtime_config",
    "set_config_path",
]
