# どこで: `src/ghxsync/core/components/__init__.py`。
# 何を: ノードレジストリへ登録する組み込みコンポーネント群の公開エイリアス。
# なぜ: 呼び出し側が登録関数だけを 1 箇所から import できるようにするため。

from .complex_nodes import (
    register_complex_components,
    register_complex_operators_components,
    register_complex_polynomials_components,
    register_complex_trig_components,
)

__all__ = [
    "register_complex_components",
    "register_complex_operators_components",
    "register_complex_polynomials_components",
    "register_complex_trig_components",
]
