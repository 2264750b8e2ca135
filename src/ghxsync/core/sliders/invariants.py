# どこで: `src/ghxsync/core/sliders/invariants.py`。
# 何を: SliderLinker の不変条件をテストで検証する関数を提供する。
# なぜ: reconcile の整合性の知識を 1 箇所へ固定し、踏み抜きを早期検知するため。

from __future__ import annotations

from .linker import SliderLinker
from .view import SliderGroupView


def assert_invariants(linker: SliderLinker) -> None:
    """SliderLinker の不変条件を検査する。

    Notes
    -----
    テスト専用の検査関数。実行時に常時呼ぶことは想定しない。
    """

    groups = linker._groups
    order = linker._group_order

    assert len(order) == len(set(order))
    assert set(order) == set(groups.keys())

    for group_id in order:
        record = groups[group_id]
        view = record.view
        assert isinstance(view, SliderGroupView)
        assert view.id == group_id
        assert view.max >= view.min
        assert view.step > 0
        assert view.min <= view.value <= view.max
        assert view.graph_count == len(view.members)
        assert view.has_warnings == bool(view.notes)
        assert len(view.notes) == len(set(view.notes))

        assert record.canonical_min == view.min
        assert record.canonical_max == view.max
        assert record.member_min.shape == (len(view.members),)
        assert record.member_max.shape == (len(view.members),)
        assert record.member_span.shape == (len(view.members),)

        for member in view.members:
            assert member.range.max >= member.range.min
            assert member.range.step > 0
            assert member.range.min <= member.value <= member.range.max
            tol = 1e-9 * max(1.0, abs(view.min), abs(view.max))
            assert view.min - tol <= member.normalized_value <= view.max + tol
            assert member.status == ("warning" if member.notes else "ok")


__all__ = ["assert_invariants"]
