# どこで: `src/ghxsync/core/sliders/election.py`。
# 何を: 同一グループ内で基準（canonical）スライダーを選ぶ比較規則を提供する。
# なぜ: 走査順に依存しない決定的な全順序で選出し、reconcile を冪等に保つため。

from __future__ import annotations

from collections.abc import Sequence

from .sources import SourceEntry


def _role_of(entry: SourceEntry) -> str | None:
    role = entry.metadata.role
    return role.casefold() if role is not None else None


def should_replace_canonical(
    current: SourceEntry | None,
    candidate: SourceEntry,
    *,
    primary_role: str,
    active_graph_id: str | None,
) -> bool:
    """candidate が current より基準にふさわしければ True を返す。

    Notes
    -----
    先に決着した条件で判定する:
    1. role が primary_role に一致する側
    2. metadata の primary/isPrimary が True の側
    3. アクティブグラフに属する側
    4. priority が小さい側（片側だけが priority を持つ場合はその側）
    5. order が小さい側（先に現れた側）
    """

    if current is None:
        return True

    current_role = _role_of(current)
    candidate_role = _role_of(candidate)
    if candidate_role == primary_role and current_role != primary_role:
        return True
    if current_role == primary_role and candidate_role != primary_role:
        return False

    if candidate.metadata.primary and not current.metadata.primary:
        return True
    if current.metadata.primary and not candidate.metadata.primary:
        return False

    if active_graph_id is not None:
        candidate_active = candidate.graph_id == active_graph_id
        current_active = current.graph_id == active_graph_id
        if candidate_active and not current_active:
            return True
        if current_active and not candidate_active:
            return False

    candidate_priority = candidate.metadata.priority
    current_priority = current.metadata.priority
    if (
        candidate_priority is not None
        and current_priority is not None
        and candidate_priority != current_priority
    ):
        return candidate_priority < current_priority
    if candidate_priority is not None and current_priority is None:
        return True
    if candidate_priority is None and current_priority is not None:
        return False

    return candidate.order < current.order


def elect_canonical(
    candidates: Sequence[SourceEntry],
    *,
    primary_role: str,
    active_graph_id: str | None,
) -> SourceEntry:
    """candidates を順に走査して基準エントリを返す（candidates は非空）。"""

    if not candidates:
        raise ValueError("candidates は 1 件以上必要です")

    canonical: SourceEntry | None = None
    for candidate in candidates:
        if should_replace_canonical(
            canonical,
            candidate,
            primary_role=primary_role,
            active_graph_id=active_graph_id,
        ):
            canonical = candidate
    assert canonical is not None
    return canonical


__all__ = ["should_replace_canonical", "elect_canonical"]
