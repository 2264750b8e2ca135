# どこで: `src/ghxsync/core/sliders/view.py`。
# 何を: スライダーグループ/メンバーの公開ビューと、map_value の結果型を定義する。
# なぜ: 外部へは不変オブジェクトだけを渡し、内部状態の変更が観測されないようにするため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

MemberStatus = Literal["ok", "warning"]


@dataclass(frozen=True, slots=True)
class MemberRange:
    """メンバー自身の補完済みレンジ。"""

    min: float
    max: float
    step: float

    def as_dict(self) -> dict[str, float]:
        return {"min": self.min, "max": self.max, "step": self.step}


@dataclass(frozen=True, slots=True)
class SliderMemberView:
    """グループに属する 1 スライダーの GUI 表示用モデル。"""

    graph_id: str
    node_id: str | None
    graph_label: str
    role: str | None
    label: str | None
    nick_name: str | None
    value: float
    normalized_value: float
    range: MemberRange
    notes: tuple[str, ...]
    status: MemberStatus

    def as_dict(self) -> dict[str, Any]:
        """JSON 化できる dict（camelCase キー）を返す。"""

        return {
            "graphId": self.graph_id,
            "nodeId": self.node_id,
            "graphLabel": self.graph_label,
            "role": self.role,
            "label": self.label,
            "nickName": self.nick_name,
            "value": self.value,
            "normalizedValue": self.normalized_value,
            "range": self.range.as_dict(),
            "notes": list(self.notes),
            "status": self.status,
        }


@dataclass(frozen=True, slots=True)
class CanonicalSource:
    """基準スライダーの出所。"""

    graph_id: str
    node_id: str | None
    graph_label: str
    role: str | None

    def as_dict(self) -> dict[str, Any]:
        return {
            "graphId": self.graph_id,
            "nodeId": self.node_id,
            "graphLabel": self.graph_label,
            "role": self.role,
        }


@dataclass(frozen=True, slots=True)
class SliderGroupView:
    """連携スライダーグループの GUI 表示用モデル。"""

    id: str
    key: str
    label: str
    nick_name: str
    value: float
    min: float
    max: float
    step: float
    graph_count: int
    notes: tuple[str, ...]
    has_warnings: bool
    canonical_source: CanonicalSource
    members: tuple[SliderMemberView, ...]

    def as_dict(self) -> dict[str, Any]:
        """JSON 化できる dict（camelCase キー）を返す。"""

        return {
            "id": self.id,
            "key": self.key,
            "label": self.label,
            "nickName": self.nick_name,
            "value": self.value,
            "min": self.min,
            "max": self.max,
            "step": self.step,
            "graphCount": self.graph_count,
            "notes": list(self.notes),
            "hasWarnings": self.has_warnings,
            "canonicalSource": self.canonical_source.as_dict(),
            "members": [member.as_dict() for member in self.members],
        }


@dataclass(frozen=True, slots=True)
class SliderUpdate:
    """グラフへ書き戻す 1 件分の値。"""

    graph_id: str
    node_id: str | None
    value: float

    def as_dict(self) -> dict[str, Any]:
        return {"graphId": self.graph_id, "nodeId": self.node_id, "value": self.value}


@dataclass(frozen=True, slots=True)
class MappedValue:
    """map_value の結果（クランプ後の基準値とメンバーごとの更新）。"""

    value: float
    updates: tuple[SliderUpdate, ...]

    def as_dict(self) -> dict[str, Any]:
        return {"value": self.value, "updates": [u.as_dict() for u in self.updates]}


__all__ = [
    "MemberStatus",
    "MemberRange",
    "SliderMemberView",
    "CanonicalSource",
    "SliderGroupView",
    "SliderUpdate",
    "MappedValue",
]
