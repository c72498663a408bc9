"""
Purpose: Decide whether an order should go back through assignment.
What it does:
Only unassigned orders whose delivery status is rejected, pending_assignment
or unset are eligible. Everything else (e.g. already delivered) is a no-op.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from partners.policy import AssignmentPolicy, default_assignment_policy

from .assignment import AssignmentResult, AssignmentStatus, assign_delivery_partner
from .store import AssignmentStore


def reassign_if_eligible(
    store: AssignmentStore,
    order_id: str,
    policy: Optional[AssignmentPolicy] = None,
    *,
    now: Optional[datetime] = None,
) -> AssignmentResult:
    policy = policy or default_assignment_policy()

    order = store.get_order(order_id)
    if order is None:
        return AssignmentResult(None, AssignmentStatus.ORDER_NOT_FOUND)

    if order.delivery_partner_id:
        return AssignmentResult(order.delivery_partner_id, AssignmentStatus.STILL_ASSIGNED)

    if order.normalized_delivery_status not in policy.reassignable_delivery_statuses:
        return AssignmentResult(None, AssignmentStatus.NO_REASSIGNMENT_NEEDED)

    return assign_delivery_partner(store, order_id, policy, now=now)
