# どこで: `src/ghxsync/core/complex/coerce.py`。
# 何を: 文字列パースと、任意形状の入力を ComplexNumber へ寄せる ensure_complex を提供する。
# なぜ: ノード入力は数値/配列/dict/文字列が混在するため、寄せ方の優先順位を 1 箇所に固定するため。

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

import numpy as np

from .number import ZERO, ComplexNumber, create_complex, to_finite_number, to_number

_WHITESPACE_RE = re.compile(r"\s+")

# alias の並び順は外部から観測される契約（先に見つかったものを採用する）。
REAL_ALIASES: tuple[str, ...] = ("real", "Real", "RE", "re", "x", "X", "a", "A")
IMAG_ALIASES: tuple[str, ...] = ("imag", "Imag", "IM", "im", "i", "I", "y", "Y", "b", "B")
MAGNITUDE_ALIASES: tuple[str, ...] = ("magnitude", "modulus", "abs", "r", "radius")
ANGLE_ALIASES: tuple[str, ...] = ("argument", "angle", "phase", "theta", "phi")
NESTED_ALIASES: tuple[str, ...] = ("values", "coords", "components")

_MISSING = object()


def _parse_imag_part(segment: str) -> float | None:
    if not segment or segment == "+":
        return 1.0
    if segment == "-":
        return -1.0
    numeric = to_number(segment)
    if numeric is None or not math.isfinite(numeric):
        return None
    return numeric


def _finite_or_none(text: str) -> float | None:
    numeric = to_number(text)
    if numeric is None or not math.isfinite(numeric):
        return None
    return numeric


def parse_complex_string(raw: Any) -> ComplexNumber | None:
    """`"3"`, `"2i"`, `"-i"`, `"3-4i"` 形式の文字列を ComplexNumber にする。

    Notes
    -----
    実部/虚部の区切りは末尾 `i` の直前から右→左に探した最後の符号（先頭を除く）。
    そのため `"1e-5+2i"` は正しく分かれるが、`"2e-3i"` は `"2e"` と `"-3"` に
    分かれてパースに失敗する。パースできなければ None を返す。
    """

    if not isinstance(raw, str):
        return None
    sanitized = _WHITESPACE_RE.sub("", raw)
    if not sanitized:
        return None
    if sanitized in {"i", "+i"}:
        return create_complex(0.0, 1.0)
    if sanitized == "-i":
        return create_complex(0.0, -1.0)

    i_index = sanitized.find("i")
    if i_index == -1:
        real_only = _finite_or_none(sanitized)
        return create_complex(real_only, 0.0) if real_only is not None else None
    if i_index != len(sanitized) - 1:
        return None

    without_i = sanitized[:i_index]
    real_text = ""
    imag_text = without_i
    for idx in range(len(without_i) - 1, 0, -1):
        if without_i[idx] in "+-":
            real_text = without_i[:idx]
            imag_text = without_i[idx:]
            break

    if not real_text:
        imag_only = _parse_imag_part(imag_text)
        if imag_only is not None:
            return create_complex(0.0, imag_only)
        real_fallback = _finite_or_none(without_i)
        return create_complex(real_fallback, 0.0) if real_fallback is not None else None

    real_value = _finite_or_none(real_text)
    imag_value = _parse_imag_part(imag_text)
    if real_value is not None and imag_value is not None:
        return create_complex(real_value, imag_value)
    return None


def _first_present(record: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """aliases の順にキーを探し、最初に存在した値を返す（None も存在扱い）。"""

    for name in aliases:
        if name in record:
            return record[name]
    return _MISSING


def _first_not_none(record: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    for name in aliases:
        value = record.get(name)
        if value is not None:
            return value
    return None


# --- mapping 用プローブ -------------------------------------------------------
# 各プローブは (record, fallback) を受け、扱えない形なら None を返す。

_Probe = Callable[[Mapping[str, Any], ComplexNumber], ComplexNumber | None]


def _probe_value_field(record: Mapping[str, Any], fallback: ComplexNumber) -> ComplexNumber | None:
    if "value" not in record:
        return None
    return ensure_complex(record["value"], fallback)


def _probe_rectangular(record: Mapping[str, Any], fallback: ComplexNumber) -> ComplexNumber | None:
    real = _first_present(record, REAL_ALIASES)
    imag = _first_present(record, IMAG_ALIASES)
    if real is _MISSING and imag is _MISSING:
        return None
    real_part = fallback.real if real is _MISSING else to_finite_number(real, fallback.real)
    imag_part = fallback.imag if imag is _MISSING else to_finite_number(imag, fallback.imag)
    return create_complex(real_part, imag_part)


def _probe_polar(record: Mapping[str, Any], fallback: ComplexNumber) -> ComplexNumber | None:
    magnitude = _first_not_none(record, MAGNITUDE_ALIASES)
    if magnitude is None:
        return None
    radius = to_finite_number(magnitude, 0.0)
    angle = to_finite_number(_first_not_none(record, ANGLE_ALIASES), 0.0)
    return create_complex(radius * math.cos(angle), radius * math.sin(angle))


def _probe_nested(record: Mapping[str, Any], fallback: ComplexNumber) -> ComplexNumber | None:
    nested = _first_not_none(record, NESTED_ALIASES)
    if nested is None:
        return None
    return ensure_complex(nested, fallback)


def _probe_numeric(record: Mapping[str, Any], fallback: ComplexNumber) -> ComplexNumber | None:
    numeric = to_number(record)
    if numeric is None or not math.isfinite(numeric):
        return None
    return create_complex(numeric, 0.0)


MAPPING_PROBES: tuple[tuple[str, _Probe], ...] = (
    ("value", _probe_value_field),
    ("rectangular", _probe_rectangular),
    ("polar", _probe_polar),
    ("nested", _probe_nested),
    ("numeric", _probe_numeric),
)


def _fallback_of(fallback: Any) -> ComplexNumber:
    if isinstance(fallback, ComplexNumber):
        return create_complex(
            to_finite_number(fallback.real, 0.0),
            to_finite_number(fallback.imag, 0.0),
        )
    if isinstance(fallback, Mapping):
        return create_complex(
            to_finite_number(fallback.get("real"), 0.0),
            to_finite_number(fallback.get("imag"), 0.0),
        )
    if isinstance(fallback, complex):
        return create_complex(
            to_finite_number(fallback.real, 0.0),
            to_finite_number(fallback.imag, 0.0),
        )
    return ZERO


def ensure_complex(value: Any, fallback: Any = ZERO) -> ComplexNumber:
    """value を ComplexNumber へ寄せて返す。寄せられなければ fallback を返す。

    Parameters
    ----------
    value : Any
        数値 / complex / 2 要素の列 / dict / 文字列 / ComplexNumber。
    fallback : ComplexNumber | Mapping | complex
        変換できない場合の値。既定はゼロ。非有限成分は 0 に寄せる。

    Notes
    -----
    dict は `MAPPING_PROBES` の順（value → 直交 alias → 極 alias → 入れ子 → 数値）で調べる。
    """

    base = _fallback_of(fallback)

    if value is None:
        return base
    if isinstance(value, ComplexNumber):
        return create_complex(value.real, value.imag)
    if isinstance(value, bool):
        return base
    if isinstance(value, (complex, np.complexfloating)):
        return create_complex(
            to_finite_number(value.real, base.real),
            to_finite_number(value.imag, base.imag),
        )
    if isinstance(value, str):
        parsed = parse_complex_string(value)
        if parsed is not None:
            return parsed
        numeric = to_number(value)
        if numeric is not None and math.isfinite(numeric):
            return create_complex(numeric, 0.0)
        return base
    if isinstance(value, (int, float, np.number)):
        numeric = to_number(value)
        if numeric is not None and math.isfinite(numeric):
            return create_complex(numeric, 0.0)
        return base

    if isinstance(value, np.ndarray):
        value = value.tolist()
    if isinstance(value, Sequence):
        items = list(value)
        if not items:
            return base
        if len(items) >= 2:
            return create_complex(
                to_finite_number(items[0], base.real),
                to_finite_number(items[1], base.imag),
            )
        return ensure_complex(items[0], base)

    if isinstance(value, Mapping):
        for _name, probe in MAPPING_PROBES:
            found = probe(value, base)
            if found is not None:
                return found
        return base

    return base


__all__ = [
    "REAL_ALIASES",
    "IMAG_ALIASES",
    "MAGNITUDE_ALIASES",
    "ANGLE_ALIASES",
    "NESTED_ALIASES",
    "MAPPING_PROBES",
    "parse_complex_string",
    "ensure_complex",
]
