# どこで: `src/ghxsync/core/sliders/range.py`。
# 何を: 欠けた min/max/step/value を持つスライダー定義から ResolvedRange を作る純粋関数を提供する。
# なぜ: どんな入力でも使えるレンジを返し、補完の痕跡をフラグとして下流の診断へ渡すため。

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class RangeDefaults:
    """境界・ステップが欠けたときに使う既定値。"""

    min: float = 0.0
    max: float = 10.0
    step: float = 0.01

    def __post_init__(self) -> None:
        for name in ("min", "max", "step"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, (int, float)):
                raise TypeError(f"RangeDefaults.{name} は数値である必要があります: got={v!r}")
            if not math.isfinite(v):
                raise ValueError(f"RangeDefaults.{name} は有限値である必要があります: got={v!r}")
        if self.step <= 0:
            raise ValueError(f"RangeDefaults.step は正の値である必要があります: got={self.step!r}")
        if self.max < self.min:
            raise ValueError(
                f"RangeDefaults.max は min 以上である必要があります: min={self.min!r}, max={self.max!r}"
            )


DEFAULT_RANGE = RangeDefaults()


@dataclass(frozen=True, slots=True)
class ResolvedRange:
    """補完済みのスライダーレンジ。

    Notes
    -----
    - 常に ``max >= min`` / ``step > 0`` / ``min <= value <= max``。
    - ``raw_*`` は入力から読めた有限値（読めなければ None）。
    """

    raw_min: float | None
    raw_max: float | None
    raw_step: float | None
    raw_value: float | None
    has_min: bool
    has_max: bool
    has_step: bool
    min: float
    max: float
    span: float
    step: float
    step_adjusted: bool
    value: float
    value_clamped: bool
    value_provided: bool
    has_range: bool


def to_finite(value: Any) -> float | None:
    """value を有限 float へ変換する。欠落・非数値・非有限は None。"""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        numeric = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return numeric if math.isfinite(numeric) else None


def clamp(value: float, lo: float, hi: float) -> float:
    if not math.isfinite(value):
        return lo
    if value < lo:
        return lo
    if value > hi:
        return hi
    return value


def resolve_bounds(
    raw_min: Any = None,
    raw_max: Any = None,
    raw_step: Any = None,
    raw_value: Any = None,
    *,
    defaults: RangeDefaults = DEFAULT_RANGE,
) -> ResolvedRange:
    """生のスライダー値から ResolvedRange を返す（例外を投げない）。

    Parameters
    ----------
    raw_min, raw_max, raw_step, raw_value : Any
        入力そのまま。数値・数値文字列以外は欠落扱い。
    defaults : RangeDefaults
        境界・ステップの既定値。

    Notes
    -----
    片側だけ境界がある場合は既定側へ寄せる:
    max のみ → ``min = min(max, defaults.min)``、
    min のみ → ``max = max(min, defaults.max)``。

    ``max - min`` が float で overflow する場合（例: ±1e308）は span を 0 とみなし
    has_range=False にするが、境界は有限なので value は min へ寄せずに範囲内の値を保つ。
    """

    n_min = to_finite(raw_min)
    n_max = to_finite(raw_max)
    n_step = to_finite(raw_step)
    n_value = to_finite(raw_value)

    has_min = n_min is not None
    has_max = n_max is not None

    if n_min is None and n_max is None:
        lo = float(defaults.min)
        hi = float(defaults.max)
    elif n_min is None:
        assert n_max is not None
        lo = min(n_max, float(defaults.min))
        hi = n_max
    elif n_max is None:
        lo = n_min
        hi = max(n_min, float(defaults.max))
    else:
        lo = n_min
        hi = n_max

    if hi < lo:
        lo, hi = hi, lo

    span = hi - lo
    if not math.isfinite(span):
        span = 0.0

    step_adjusted = False
    if n_step is None or n_step <= 0:
        step = span / 100.0 if span > 0 else float(defaults.step)
        step_adjusted = True
    else:
        step = n_step

    value_provided = n_value is not None
    value = n_value if n_value is not None else lo
    clamped = clamp(value, lo, hi)

    return ResolvedRange(
        raw_min=n_min,
        raw_max=n_max,
        raw_step=n_step,
        raw_value=n_value,
        has_min=has_min,
        has_max=has_max,
        has_step=n_step is not None,
        min=lo,
        max=hi,
        span=span,
        step=step,
        step_adjusted=step_adjusted,
        value=clamped,
        value_clamped=clamped != value,
        value_provided=value_provided,
        has_range=span > 0,
    )


def resolve_range(slider: Any, *, defaults: RangeDefaults = DEFAULT_RANGE) -> ResolvedRange:
    """min/max/step/value キー（または同名属性）を持つ slider から ResolvedRange を返す。

    slider が None でも既定レンジを返す。
    """

    if isinstance(slider, Mapping):
        get = slider.get
        return resolve_bounds(
            get("min"), get("max"), get("step"), get("value"), defaults=defaults
        )
    return resolve_bounds(
        getattr(slider, "min", None),
        getattr(slider, "max", None),
        getattr(slider, "step", None),
        getattr(slider, "value", None),
        defaults=defaults,
    )


__all__ = [
    "RangeDefaults",
    "DEFAULT_RANGE",
    "ResolvedRange",
    "to_finite",
    "clamp",
    "resolve_bounds",
    "resolve_range",
]
