from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date

from ..catalog.models import Venue
from .config import DEFAULT_ENGINE_CONFIG
from .models import GroupPlan, Participant
from .scoring import rank_group_candidates
from .slots import SlotSearch, find_slot


def plan_group_outing(
    participants: Sequence[Participant],
    venues: Sequence[Venue],
    target_date: date,
    search: SlotSearch,
    weights: Mapping[str, float] | None = None,
    limit: int = DEFAULT_ENGINE_CONFIG.top_n,
) -> GroupPlan:
    """Find the date's best slot, then rank every venue against it."""
    slot = find_slot(participants, target_date, search)
    if slot is None:
        return GroupPlan(date=target_date)
    candidates = rank_group_candidates(venues, participants, slot, weights=weights, limit=limit)
    return GroupPlan(date=target_date, slot=slot, candidates=tuple(candidates))
