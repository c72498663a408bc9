"""
Purpose: Batch pass over orders still waiting for a partner.
What it does:
- Queries unassigned orders whose order status is pending/confirmed/dispatched
  and whose delivery status is unset or pending_assignment.
- Runs a fresh assignment (not the reassignment gate) for each of them.
- Returns how many orders were attempted, whatever each attempt's outcome.

A failing order is logged, counted as processed, and the sweep moves on.
With policy.sweep_workers > 1 distinct orders run on a bounded thread pool;
the query yields each order once, so one order is never attempted twice in a sweep.
Pool threads release their store resources (e.g. DB connections) after each order.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, Optional

from partners.policy import AssignmentPolicy, default_assignment_policy

from .assignment import assign_delivery_partner
from .store import AssignmentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    processed: int

    def to_dict(self) -> Dict[str, Any]:
        return {"processed": self.processed}


def _attempt(store: AssignmentStore, order_id: str, policy: AssignmentPolicy) -> None:
    try:
        result = assign_delivery_partner(store, order_id, policy)
        logger.debug("Sweep attempt for order %s -> %s", order_id, result.status.value)
    except Exception:
        logger.exception("Sweep failed to assign order %s, continuing", order_id)


def _attempt_in_worker(store: AssignmentStore, order_id: str, policy: AssignmentPolicy) -> None:
    try:
        _attempt(store, order_id, policy)
    finally:
        store.close()


def sweep_pending(store: AssignmentStore, policy: Optional[AssignmentPolicy] = None) -> SweepResult:
    policy = policy or default_assignment_policy()

    try:
        orders = store.list_sweepable_orders(
            policy.sweepable_order_statuses,
            policy.sweepable_delivery_statuses,
        )
    except Exception:
        logger.exception("Pending sweep query failed")
        return SweepResult(processed=0)

    if not orders:
        return SweepResult(processed=0)

    order_ids = [order.id for order in orders]

    if policy.sweep_workers > 1:
        with ThreadPoolExecutor(max_workers=policy.sweep_workers) as pool:
            list(pool.map(lambda order_id: _attempt_in_worker(store, order_id, policy), order_ids))
    else:
        for order_id in order_ids:
            _attempt(store, order_id, policy)

    logger.info("Pending sweep processed %d orders", len(order_ids))
    return SweepResult(processed=len(order_ids))
