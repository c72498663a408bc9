"""
Purpose: The race-safe write that binds one partner to one order.
What it does:
Reads the order, ranks the available partners, and claims the order for the
top candidate with a conditional write ("only if the partner field is still
null"). There is no lock manager: the store's atomic conditional update is
the only arbitration between concurrent attempts on the same order.

All outcomes are returned as AssignmentResult data. Only store failures raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from partners.directory import PartnerDirectory
from partners.load import LoadTracker
from partners.policy import AssignmentPolicy, default_assignment_policy

from .scoring import rank_candidates
from .store import AssignmentStore

logger = logging.getLogger(__name__)


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    ALREADY_ASSIGNED = "already_assigned"
    ORDER_NOT_FOUND = "order_not_found"
    NO_AVAILABLE_PARTNERS = "no_available_partners"
    NO_CANDIDATES = "no_candidates"
    RACE_LOST_OR_ALREADY_ASSIGNED = "race_lost_or_already_assigned"
    # reassignment outcomes
    STILL_ASSIGNED = "still_assigned"
    NO_REASSIGNMENT_NEEDED = "no_reassignment_needed"


@dataclass(frozen=True)
class AssignmentResult:
    assigned_partner_id: Optional[str]
    status: AssignmentStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assignedPartnerId": self.assigned_partner_id,
            "status": self.status.value,
        }


def assign_delivery_partner(
    store: AssignmentStore,
    order_id: str,
    policy: Optional[AssignmentPolicy] = None,
    *,
    now: Optional[datetime] = None,
) -> AssignmentResult:
    """
    Assign the best available partner to `order_id`.

    Safe to call concurrently for the same order: exactly one caller's
    conditional write succeeds, every other caller gets
    RACE_LOST_OR_ALREADY_ASSIGNED. That status is final for this attempt and
    must not be retried with the same candidate without re-reading the order.
    """
    policy = policy or default_assignment_policy()

    order = store.get_order(order_id)
    if order is None:
        return AssignmentResult(None, AssignmentStatus.ORDER_NOT_FOUND)

    # idempotent short-circuit: no writes
    if order.delivery_partner_id:
        return AssignmentResult(order.delivery_partner_id, AssignmentStatus.ALREADY_ASSIGNED)

    now = now or datetime.now(timezone.utc)

    directory = PartnerDirectory(store)
    records = directory.list_available_records()
    if not records:
        store.mark_pending_assignment(order_id, now)
        logger.info("No available partners for order %s, parked as pending_assignment", order_id)
        return AssignmentResult(None, AssignmentStatus.NO_AVAILABLE_PARTNERS)

    load_counts = LoadTracker(store, policy).active_delivery_counts(
        [record.partner_id for record in records]
    )

    # partners without a profile drop out here
    partners = directory.join_profiles(records)
    candidates = rank_candidates(order, partners, load_counts)
    logger.debug("Ranked %d candidates for order %s", len(candidates), order_id)
    if not candidates:
        store.mark_pending_assignment(order_id, now)
        logger.info("No candidates for order %s, parked as pending_assignment", order_id)
        return AssignmentResult(None, AssignmentStatus.NO_CANDIDATES)

    selected = candidates[0]

    claimed_partner_id = store.claim_order(order_id, selected.partner_id, now)
    if not claimed_partner_id:
        # someone else's conditional write got there first
        logger.info("Order %s was claimed concurrently, skipping partner %s", order_id, selected.partner_id)
        return AssignmentResult(None, AssignmentStatus.RACE_LOST_OR_ALREADY_ASSIGNED)

    store.touch_partner_last_assigned(claimed_partner_id, now)
    logger.info(
        "Assigned order %s to partner %s (rank group %d, %d active)",
        order_id,
        claimed_partner_id,
        selected.rank_group,
        selected.active_deliveries,
    )
    return AssignmentResult(claimed_partner_id, AssignmentStatus.ASSIGNED)
