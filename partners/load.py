"""
Purpose: Current workload per partner.
What it does:
Counts each partner's orders whose delivery has not reached a terminal status.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING, Dict, Iterable, Optional

from orders.models import normalize_status
from .policy import AssignmentPolicy, default_assignment_policy

if TYPE_CHECKING:
    from dispatch.store import AssignmentStore


class LoadTracker:
    def __init__(self, store: "AssignmentStore", policy: Optional[AssignmentPolicy] = None):
        self.store = store
        self.policy = policy or default_assignment_policy()

    def active_delivery_counts(self, partner_ids: Iterable[str]) -> Dict[str, int]:
        """
        partner_id -> number of active deliveries.
        Partners with no active delivery are absent, callers default to 0.
        """
        partner_ids = list(partner_ids)
        if not partner_ids:
            return {}

        counts: Counter = Counter()
        for partner_id, delivery_status in self.store.list_partner_deliveries(partner_ids):
            if not partner_id:
                continue
            if normalize_status(delivery_status) in self.policy.terminal_delivery_statuses:
                continue
            counts[partner_id] += 1

        return dict(counts)
