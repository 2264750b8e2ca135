# どこで: `src/ghxsync/core/sliders/notes.py`。
# 何を: スライダー連携の診断コードと表示メッセージの対応表を提供する。
# なぜ: コードは内部判定に、メッセージは GUI 表示に使い分けるため。

from __future__ import annotations

from collections.abc import Iterable

CANONICAL_RANGE_DERIVED = "canonical-range-derived"
CANONICAL_STEP_ADJUSTED = "canonical-step-adjusted"
CANONICAL_VALUE_CLAMPED = "canonical-value-clamped"
MISSING_BOUNDS = "missing-bounds"
NO_RANGE = "no-range"
STEP_ADJUSTED = "step-adjusted"
VALUE_CLAMPED = "value-clamped"
NORMALIZED = "normalized"
INVALID_VALUE = "invalid-value"

NOTE_MESSAGES: dict[str, str] = {
    CANONICAL_RANGE_DERIVED: "基準スライダーに境界がないため既定値を適用しました。",
    CANONICAL_STEP_ADJUSTED: "基準スライダーのステップを再計算しました。",
    CANONICAL_VALUE_CLAMPED: "基準値を利用可能な範囲に収めました。",
    MISSING_BOUNDS: "欠けていた最小値または最大値を補完しました。",
    NO_RANGE: "範囲がありません（min = max）。値の反応が限定されます。",
    STEP_ADJUSTED: "連携スライダーのステップ幅を揃えました。",
    VALUE_CLAMPED: "値が元の範囲外だったため範囲内に収めました。",
    NORMALIZED: "値を基準レンジへ再スケールしました。",
    INVALID_VALUE: "不正なスライダー値を既定値で置き換えました。",
}


def note_message(code: str) -> str:
    """code の表示メッセージを返す。未知コードはそのまま返す。"""

    return NOTE_MESSAGES.get(code, code)


def unique_messages(codes: Iterable[str]) -> tuple[str, ...]:
    """codes を出現順で重複除去し、メッセージへ変換して返す。"""

    seen: set[str] = set()
    messages: list[str] = []
    for code in codes:
        if not code or code in seen:
            continue
        seen.add(code)
        messages.append(note_message(code))
    return tuple(messages)


__all__ = [
    "CANONICAL_RANGE_DERIVED",
    "CANONICAL_STEP_ADJUSTED",
    "CANONICAL_VALUE_CLAMPED",
    "MISSING_BOUNDS",
    "NO_RANGE",
    "STEP_ADJUSTED",
    "VALUE_CLAMPED",
    "NORMALIZED",
    "INVALID_VALUE",
    "NOTE_MESSAGES",
    "note_message",
    "unique_messages",
]
