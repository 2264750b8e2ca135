# どこで: `src/ghxsync/core/sliders/identity.py`。
# 何を: スライダーのグループキー算出と、公開 id（slug）の採番を提供する。
# なぜ: nickname が無いスライダー同士を誤って束ねず、GUI 向け id を 1 パス内で一意に保つため。

from __future__ import annotations

import re
import unicodedata

DEFAULT_SLUG = "slider"

_NON_WORD_RE = re.compile(r"[^\w\s-]+", re.ASCII)
_SEPARATOR_RE = re.compile(r"[\s_-]+", re.ASCII)


def normalize_nickname(nickname: object) -> str:
    """nickname を trim + casefold して返す。str 以外は空文字。"""

    if not isinstance(nickname, str):
        return ""
    return nickname.strip().casefold()


def group_key(nickname: object, *, graph_id: str, node_id: str | None, order: int) -> str:
    """グループキーを返す。

    nickname があれば正規化 nickname、無ければ ``"{graph_id}:{node_id or order}"``。
    """

    normalized = normalize_nickname(nickname)
    if normalized:
        return normalized
    return f"{graph_id}:{node_id if node_id else order}"


def slugify(value: object, fallback: str = DEFAULT_SLUG) -> str:
    """value を ASCII の slug に変換する（空になれば fallback）。

    NFKD 分解 → 記号除去 → trim → 小文字化 → 空白/`_`/`-` の連続を `-` 1 つへ。
    """

    if not isinstance(value, str) or not value:
        return fallback
    text = unicodedata.normalize("NFKD", value)
    text = _NON_WORD_RE.sub("", text).strip().lower()
    text = _SEPARATOR_RE.sub("-", text)
    return text or fallback


class SlugAllocator:
    """1 回の reconcile 内で slug の衝突を `-2`, `-3`, ... で解消する。"""

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._used: set[str] = set()

    def allocate(self, base: str) -> str:
        """base から未使用の id を採番して返す。"""

        count = self._counts.get(base, 0)
        while True:
            count += 1
            candidate = base if count == 1 else f"{base}-{count}"
            if candidate not in self._used:
                break
        self._counts[base] = count
        self._used.add(candidate)
        return candidate


__all__ = [
    "DEFAULT_SLUG",
    "normalize_nickname",
    "group_key",
    "slugify",
    "SlugAllocator",
]
