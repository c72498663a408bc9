"""
Purpose: Ranking model (the "who is best" layer).
What it does:
Takes base candidates (already available, profile known) and orders them by

    (rank_group, active_deliveries, last_assigned_at epoch ms or 0, distance_score)

- rank_group: 1 same city, 2 same state, 3 no locality match
- active_deliveries: least-loaded first
- last_assigned_at: assigned longest ago first, never-assigned (0) first of all
- distance_score: closest first, unknown location (inf) last

Python's sort is stable, so full ties keep the input order and the ranking
is deterministic for a fixed snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from orders.models import Order
    from partners.models import AvailablePartner

SAME_CITY = 1
SAME_STATE = 2
NO_LOCALITY_MATCH = 3


@dataclass(frozen=True)
class Candidate:
    """
    A partner under consideration for one assignment attempt. Never persisted.
    """
    partner_id: str
    rank_group: int
    active_deliveries: int
    last_assigned_at: Optional[datetime]
    distance_score: float

    @property
    def last_assigned_epoch_ms(self) -> int:
        if self.last_assigned_at is None:
            return 0
        moment = self.last_assigned_at
        if moment.tzinfo is None:
            # naive timestamps are stored as UTC
            moment = moment.replace(tzinfo=timezone.utc)
        return int(moment.timestamp() * 1000)

    def sort_key(self) -> Tuple[int, int, int, float]:
        return (
            self.rank_group,
            self.active_deliveries,
            self.last_assigned_epoch_ms,
            self.distance_score,
        )


def _normalize_place(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def locality_rank_group(
    order_city: Optional[str],
    order_state: Optional[str],
    partner_city: Optional[str],
    partner_state: Optional[str],
) -> int:
    """
    1 if cities match, else 2 if states match, else 3.
    Comparison is trimmed + case-insensitive and both sides must be non-empty.
    """
    order_city, partner_city = _normalize_place(order_city), _normalize_place(partner_city)
    if order_city and partner_city and order_city == partner_city:
        return SAME_CITY

    order_state, partner_state = _normalize_place(order_state), _normalize_place(partner_state)
    if order_state and partner_state and order_state == partner_state:
        return SAME_STATE

    return NO_LOCALITY_MATCH


def sort_candidates(candidates: Sequence[Candidate]) -> List[Candidate]:
    return sorted(candidates, key=lambda candidate: candidate.sort_key())


def rank_candidates(
    order: "Order",
    partners: Sequence["AvailablePartner"],
    load_counts: Optional[Dict[str, int]] = None,
) -> List[Candidate]:
    """
    Ordered candidate list for one order. Empty partners -> empty list.
    """
    from .candidate_filter import build_base_candidates

    if not partners:
        return []

    return sort_candidates(build_base_candidates(order, partners, load_counts))
