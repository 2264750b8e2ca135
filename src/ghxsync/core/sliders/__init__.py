# どこで: `src/ghxsync/core/sliders/__init__.py`。
# 何を: スライダー連携バックエンドの公開エイリアスをまとめる。
# なぜ: ランタイム層から最小インポートで使えるようにするため。

from .identity import normalize_nickname, slugify
from .linker import DEFAULT_PRIMARY_ROLE, SliderLinker
from .notes import NOTE_MESSAGES, unique_messages
from .range import DEFAULT_RANGE, RangeDefaults, ResolvedRange, resolve_bounds, resolve_range
from .sources import GraphSource
from .view import (
    CanonicalSource,
    MappedValue,
    MemberRange,
    SliderGroupView,
    SliderMemberView,
    SliderUpdate,
)

__all__ = [
    "normalize_nickname",
    "slugify",
    "DEFAULT_PRIMARY_ROLE",
    "SliderLinker",
    "NOTE_MESSAGES",
    "unique_messages",
    "DEFAULT_RANGE",
    "RangeDefaults",
    "ResolvedRange",
    "resolve_bounds",
    "resolve_range",
    "GraphSource",
    "CanonicalSource",
    "MappedValue",
    "MemberRange",
    "SliderGroupView",
    "SliderMemberView",
    "SliderUpdate",
]
