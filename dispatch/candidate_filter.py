#Purpose: Builds the base candidate set for one order before ranking.
#For every available partner it derives the rank inputs:
#locality rank group (same city / same state / neither)
#current active-delivery count
#last-assigned timestamp (fairness)
#distance score in km (inf when either location is unknown)

#Output: unranked Candidate list, consumed by dispatch.scoring.

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from orders.models import Order
from partners.models import AvailablePartner
from routing.geo import distance_km

from .scoring import Candidate, locality_rank_group


def build_base_candidates(
    order: Order,
    partners: Sequence[AvailablePartner],
    load_counts: Optional[Dict[str, int]] = None,
) -> List[Candidate]:
    """
    One Candidate per available partner, in the partners' input order.
    """
    load_counts = load_counts or {}
    address = order.address

    order_city = address.city if address else None
    order_state = address.state if address else None
    order_lat = address.latitude if address else None
    order_lon = address.longitude if address else None

    candidates: List[Candidate] = []
    for partner in partners:
        profile = partner.profile

        candidates.append(
            Candidate(
                partner_id=partner.partner_id,
                rank_group=locality_rank_group(order_city, order_state, profile.city, profile.state),
                active_deliveries=load_counts.get(partner.partner_id, 0),
                last_assigned_at=partner.availability.last_assigned_at,
                distance_score=distance_km(order_lat, order_lon, profile.latitude, profile.longitude),
            )
        )

    return candidates
