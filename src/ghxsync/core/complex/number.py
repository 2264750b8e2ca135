# どこで: `src/ghxsync/core/complex/number.py`。
# 何を: 複素数の値型 ComplexNumber と、その生成ヘルパを提供する。
# なぜ: 極形式（magnitude/argument）を生成時に確定させ、利用側で再計算させないため。

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

EPSILON = 1e-12


@dataclass(frozen=True, slots=True)
class ComplexNumber:
    """直交形式と極形式を両方保持する複素数。

    Notes
    -----
    直接コンストラクタを呼ばず `create_complex()` を使う。
    real/imag のどちらかが非有限なら magnitude/argument は NaN。
    """

    real: float
    imag: float
    magnitude: float
    argument: float

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    def as_dict(self) -> dict[str, float]:
        """JSON 化できる dict を返す。"""

        return {
            "real": self.real,
            "imag": self.imag,
            "magnitude": self.magnitude,
            "argument": self.argument,
        }


def create_complex(real: float, imag: float) -> ComplexNumber:
    """real/imag から ComplexNumber を生成する。"""

    real = float(real)
    imag = float(imag)
    if math.isfinite(real) and math.isfinite(imag):
        return ComplexNumber(
            real=real,
            imag=imag,
            magnitude=math.hypot(real, imag),
            argument=math.atan2(imag, real),
        )
    return ComplexNumber(real=real, imag=imag, magnitude=math.nan, argument=math.nan)


ZERO = create_complex(0.0, 0.0)
ONE = create_complex(1.0, 0.0)


def to_number(value: Any) -> float | None:
    """value を float へ変換して返す。変換できなければ None。

    bool は数値として扱わない。非有限値（NaN/inf）はそのまま返す。
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


def to_finite_number(value: Any, fallback: float = 0.0) -> float:
    """value を有限 float へ変換して返す。できなければ fallback。"""

    numeric = to_number(value)
    if numeric is None or not math.isfinite(numeric):
        return float(fallback)
    return numeric


__all__ = [
    "EPSILON",
    "ComplexNumber",
    "create_complex",
    "ZERO",
    "ONE",
    "to_number",
    "to_finite_number",
]
