"""
Purpose: Central configuration for partner assignment and the pending sweep.
What it does:

Stores all tunable status sets and limits for assigning partners:

TERMINAL_DELIVERY_STATUSES = delivered, completed
REASSIGNABLE_DELIVERY_STATUSES = rejected, pending_assignment, (unset)
SWEEPABLE_ORDER_STATUSES = pending, confirmed, dispatched
SWEEP_WORKERS = 1

Rule: No assignment logic here, only parameters and their sanity checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet


@dataclass(frozen=True)
class AssignmentPolicy:
    """
    Central configuration for partner assignment.
    Status values are compared after trimming and lower-casing.
    """

    # --- Load tracking ---
    # A partner's order stops counting as active load once it reaches one of these.
    terminal_delivery_statuses: FrozenSet[str] = frozenset({"delivered", "completed"})

    # --- Reassignment gate ---
    # "" stands for an unset delivery status.
    reassignable_delivery_statuses: FrozenSet[str] = frozenset({"rejected", "pending_assignment", ""})

    # --- Pending sweep filter ---
    sweepable_order_statuses: FrozenSet[str] = frozenset({"pending", "confirmed", "dispatched"})
    # "" stands for an unset delivery status.
    sweepable_delivery_statuses: FrozenSet[str] = frozenset({"", "pending_assignment"})

    # --- Sweep concurrency ---
    # 1 keeps the sweep sequential. Larger values process distinct orders
    # on a bounded thread pool.
    sweep_workers: int = 1

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.sweep_workers < 1:
            raise ValueError("sweep_workers must be >= 1")

        if not self.terminal_delivery_statuses:
            raise ValueError("terminal_delivery_statuses must not be empty")

        if not self.sweepable_order_statuses:
            raise ValueError("sweepable_order_statuses must not be empty")

        if self.terminal_delivery_statuses & self.reassignable_delivery_statuses:
            raise ValueError("a terminal delivery status cannot be reassignable")


def default_assignment_policy() -> AssignmentPolicy:
    """
    Convenience factory for the default policy.
    """
    p = AssignmentPolicy()
    p.validate()
    return p
