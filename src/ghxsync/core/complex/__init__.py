# どこで: `src/ghxsync/core/complex/__init__.py`。
# 何を: 複素数ツールキットの公開エイリアスをまとめる。
# なぜ: ノード登録側から最小インポートで使えるようにするため。

from .coerce import ensure_complex, parse_complex_string
from .number import EPSILON, ONE, ZERO, ComplexNumber, create_complex
from .ops import ComplexToolkit, default_toolkit

__all__ = [
    "EPSILON",
    "ONE",
    "ZERO",
    "ComplexNumber",
    "create_complex",
    "ensure_complex",
    "parse_complex_string",
    "ComplexToolkit",
    "default_toolkit",
]
