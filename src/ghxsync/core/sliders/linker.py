# どこで: `src/ghxsync/core/sliders/linker.py`。
# 何を: 複数グラフの同名スライダーを束ね、基準レンジへの正規化と双方向の値写像を行う SliderLinker を提供する。
# なぜ: 1 つの操作で複数グラフを同期させつつ、欠けた/壊れた定義でも診断付きで動き続けるため。

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from .election import elect_canonical
from .identity import SlugAllocator, group_key, slugify
from .notes import (
    CANONICAL_RANGE_DERIVED,
    CANONICAL_STEP_ADJUSTED,
    CANONICAL_VALUE_CLAMPED,
    INVALID_VALUE,
    MISSING_BOUNDS,
    NO_RANGE,
    NORMALIZED,
    STEP_ADJUSTED,
    VALUE_CLAMPED,
    unique_messages,
)
from .range import DEFAULT_RANGE, RangeDefaults, ResolvedRange, clamp, resolve_range, to_finite
from .sources import SourceEntry, flatten_sources
from .view import (
    CanonicalSource,
    MappedValue,
    MemberRange,
    SliderGroupView,
    SliderMemberView,
    SliderUpdate,
)

if TYPE_CHECKING:
    from ghxsync.core.runtime_config import RuntimeConfig

_logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_ROLE = "wireframe"


@dataclass(frozen=True, slots=True)
class _GroupRecord:
    """グループの内部表現（公開ビュー + 逆写像用の変換係数）。"""

    view: SliderGroupView
    canonical_min: float
    canonical_max: float
    canonical_span: float
    member_min: np.ndarray
    member_max: np.ndarray
    member_span: np.ndarray


def normalize_onto(member: ResolvedRange, canonical: ResolvedRange) -> tuple[float, bool]:
    """member の値を canonical のスケールへ写し、(値, 相対位置をクランプしたか) を返す。

    どちらかの span が 0 なら canonical の min（canonical 側が 0 なら canonical.value）。
    """

    if canonical.span > 0 and member.span > 0:
        relative = (member.value - member.min) / member.span
        if not math.isfinite(relative):
            relative = 0.0
        clamped = min(max(relative, 0.0), 1.0)
        return canonical.min + clamped * canonical.span, clamped != relative
    if member.span == 0:
        return canonical.min, False
    return canonical.value, False


class SliderLinker:
    """グラフ横断でスライダーをグループ化し、値を相互に写像する。

    Notes
    -----
    - `reconcile()` のたびに全状態を作り直す（差分更新しない）。
    - 新しい状態はローカルで組み立ててから一括で差し替える。
    - 公開ビューは不変オブジェクトなので、返した後に内部が変わっても影響しない。
    - 全操作は 1 つのロックで直列化する（マルチスレッドのホスト向け）。
    """

    def __init__(
        self,
        *,
        primary_role: str = DEFAULT_PRIMARY_ROLE,
        defaults: RangeDefaults = DEFAULT_RANGE,
    ) -> None:
        if not isinstance(primary_role, str):
            raise TypeError(f"primary_role は str である必要があります: got={primary_role!r}")
        if not isinstance(defaults, RangeDefaults):
            raise TypeError(f"defaults は RangeDefaults である必要があります: got={defaults!r}")
        self._primary_role = primary_role.casefold()
        self._defaults = defaults
        self._groups: dict[str, _GroupRecord] = {}
        self._group_order: list[str] = []
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: RuntimeConfig) -> SliderLinker:
        """RuntimeConfig の sliders 設定から SliderLinker を作る。"""

        return cls(
            primary_role=config.primary_role,
            defaults=RangeDefaults(
                min=config.default_min,
                max=config.default_max,
                step=config.default_step,
            ),
        )

    @property
    def primary_role(self) -> str:
        return self._primary_role

    def clear(self) -> None:
        """全グループを破棄する。"""

        with self._lock:
            self._groups = {}
            self._group_order = []

    def has_groups(self) -> bool:
        with self._lock:
            return bool(self._group_order)

    def reconcile(self, sources: Iterable[Any] | None, active_graph_id: str | None = None) -> None:
        """sources からグループを作り直す。

        Parameters
        ----------
        sources : Iterable
            `{graphId, metadata, sliders}` 形式の dict または GraphSource の列。
        active_graph_id : str | None
            アクティブなグラフ id。canonical 選出の 3 番目の条件に使う。
        """

        with self._lock:
            entries = flatten_sources(sources)

            buckets: dict[str, list[SourceEntry]] = {}
            for entry in entries:
                key = group_key(
                    entry.slider.nick_name,
                    graph_id=entry.graph_id,
                    node_id=entry.slider.node_id,
                    order=entry.order,
                )
                buckets.setdefault(key, []).append(entry)

            allocator = SlugAllocator()
            groups: dict[str, _GroupRecord] = {}
            group_order: list[str] = []
            for key, candidates in buckets.items():
                canonical = elect_canonical(
                    candidates,
                    primary_role=self._primary_role,
                    active_graph_id=active_graph_id,
                )
                record = self._build_group(key, candidates, canonical, allocator)
                groups[record.view.id] = record
                group_order.append(record.view.id)

            self._groups = groups
            self._group_order = group_order

        _logger.debug(
            "reconcile: sliders=%d groups=%d active=%s",
            len(entries),
            len(group_order),
            active_graph_id,
        )

    def _build_group(
        self,
        key: str,
        candidates: list[SourceEntry],
        canonical: SourceEntry,
        allocator: SlugAllocator,
    ) -> _GroupRecord:
        canonical_range = resolve_range(canonical.slider, defaults=self._defaults)
        group_codes: list[str] = []
        if not canonical_range.has_min or not canonical_range.has_max:
            group_codes.append(CANONICAL_RANGE_DERIVED)
        if canonical_range.step_adjusted:
            group_codes.append(CANONICAL_STEP_ADJUSTED)
        if canonical_range.value_clamped:
            group_codes.append(CANONICAL_VALUE_CLAMPED)

        slider = canonical.slider
        canonical_label = slider.label or slider.nick_name or slider.node_id or "Slider"
        canonical_nick = slider.nick_name or slider.label or canonical_label

        members: list[SliderMemberView] = []
        mins: list[float] = []
        maxs: list[float] = []
        spans: list[float] = []
        for candidate in candidates:
            member_range = resolve_range(candidate.slider, defaults=self._defaults)
            codes: list[str] = []
            if not member_range.has_min or not member_range.has_max:
                codes.append(MISSING_BOUNDS)
            if not member_range.has_range:
                codes.append(NO_RANGE)
            if member_range.step_adjusted:
                codes.append(STEP_ADJUSTED)
            if member_range.value_clamped:
                codes.append(VALUE_CLAMPED)
            if candidate.slider.has_value and to_finite(candidate.slider.value) is None:
                codes.append(INVALID_VALUE)

            normalized_value, relative_clamped = normalize_onto(member_range, canonical_range)
            if relative_clamped:
                codes.append(NORMALIZED)
            group_codes.extend(codes)

            member_slider = candidate.slider
            members.append(
                SliderMemberView(
                    graph_id=candidate.graph_id,
                    node_id=member_slider.node_id,
                    graph_label=candidate.metadata.label or candidate.graph_id,
                    role=candidate.metadata.role,
                    label=member_slider.label or member_slider.nick_name or member_slider.node_id,
                    nick_name=member_slider.nick_name,
                    value=member_range.value,
                    normalized_value=normalized_value,
                    range=MemberRange(
                        min=member_range.min,
                        max=member_range.max,
                        step=member_range.step,
                    ),
                    notes=unique_messages(codes),
                    status="warning" if codes else "ok",
                )
            )
            mins.append(member_range.min)
            maxs.append(member_range.max)
            spans.append(member_range.span)

        group_id = allocator.allocate(slugify(canonical_nick or canonical_label or key))
        view = SliderGroupView(
            id=group_id,
            key=key,
            label=canonical_label,
            nick_name=canonical_nick,
            value=canonical_range.value,
            min=canonical_range.min,
            max=canonical_range.max,
            step=canonical_range.step,
            graph_count=len(members),
            notes=unique_messages(group_codes),
            has_warnings=bool(group_codes),
            canonical_source=CanonicalSource(
                graph_id=canonical.graph_id,
                node_id=slider.node_id,
                graph_label=canonical.metadata.label or canonical.graph_id,
                role=canonical.metadata.role,
            ),
            members=tuple(members),
        )
        return _GroupRecord(
            view=view,
            canonical_min=canonical_range.min,
            canonical_max=canonical_range.max,
            canonical_span=canonical_range.span,
            member_min=np.asarray(mins, dtype=np.float64),
            member_max=np.asarray(maxs, dtype=np.float64),
            member_span=np.asarray(spans, dtype=np.float64),
        )

    def list(self) -> list[SliderGroupView]:
        """全グループのビューを初出順で返す。"""

        with self._lock:
            return [self._groups[group_id].view for group_id in self._group_order]

    def get_group(self, group_id: str) -> SliderGroupView | None:
        """group_id のビューを返す。未知なら None。"""

        with self._lock:
            record = self._groups.get(group_id)
            return record.view if record is not None else None

    def map_value(self, group_id: str, canonical_value: Any) -> MappedValue | None:
        """基準スケールの値を各メンバーのスケールへ写して返す。

        Returns
        -------
        MappedValue | None
            クランプ後の基準値とメンバー順の更新列。group_id が未知なら None。

        Notes
        -----
        canonical_value が数値でなければグループの現在値を使う。
        """

        with self._lock:
            record = self._groups.get(group_id)
            if record is None:
                return None

            numeric = to_finite(canonical_value)
            if numeric is None:
                numeric = record.view.value
            value = clamp(numeric, record.canonical_min, record.canonical_max)

            c_span = record.canonical_span
            relative = (value - record.canonical_min) / c_span if c_span > 0 else 0.0
            if not math.isfinite(relative):
                relative = 0.0
            relative = min(max(relative, 0.0), 1.0)

            rescale = (record.member_span > 0) & (c_span > 0)
            mapped = np.where(rescale, record.member_min + relative * record.member_span, value)
            lo = np.minimum(record.member_min, record.member_max)
            hi = np.maximum(record.member_min, record.member_max)
            mapped = np.clip(mapped, lo, hi)

            updates = tuple(
                SliderUpdate(graph_id=member.graph_id, node_id=member.node_id, value=float(v))
                for member, v in zip(record.view.members, mapped.tolist())
            )
            return MappedValue(value=value, updates=updates)


__all__ = ["DEFAULT_PRIMARY_ROLE", "SliderLinker", "normalize_onto"]
