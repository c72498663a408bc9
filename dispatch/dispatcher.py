"""
Purpose: Orchestrator / decision pipeline (the "glue").
What it does:
Exposes the three engine operations to request handlers:
- assign: bind the best available partner to one order
- reassign: re-run assignment for a rejected / parked order
- assignPending: sweep every order still waiting for a partner

Each call is stateless; any number may run at once against the same store.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from partners.policy import AssignmentPolicy, default_assignment_policy

from .assignment import AssignmentResult, assign_delivery_partner
from .reassignment import reassign_if_eligible
from .store import AssignmentStore
from .sweeper import SweepResult, sweep_pending

ACTION_ASSIGN = "assign"
ACTION_REASSIGN = "reassign"
ACTION_ASSIGN_PENDING = "assignPending"

ACTIONS = (ACTION_ASSIGN, ACTION_REASSIGN, ACTION_ASSIGN_PENDING)


class AssignmentRequestError(Exception):
    """Raised when a request cannot be attempted as given (client error)."""
    pass


class MissingOrderIdError(AssignmentRequestError):
    """Raised when assign / reassign is called without an order id."""
    pass


class UnsupportedActionError(AssignmentRequestError):
    """Raised for an action outside assign / reassign / assignPending."""
    pass


class Dispatcher:
    """
    Entry point for assign / reassign / sweep over one store.
    """
    def __init__(self, store: AssignmentStore, policy: Optional[AssignmentPolicy] = None):
        self.store = store
        self.policy = policy or default_assignment_policy()

    def assign(self, order_id: str) -> AssignmentResult:
        return assign_delivery_partner(self.store, order_id, self.policy)

    def reassign(self, order_id: str) -> AssignmentResult:
        return reassign_if_eligible(self.store, order_id, self.policy)

    def sweep_pending(self) -> SweepResult:
        return sweep_pending(self.store, self.policy)

    def handle(self, action: Optional[str] = None, order_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Run one action and return its JSON-ready result.
        `action` defaults to assign. Raises AssignmentRequestError for bad input
        before touching the store.
        """
        action = action or ACTION_ASSIGN
        if action not in ACTIONS:
            raise UnsupportedActionError(f"Unsupported action: {action}")

        if action == ACTION_ASSIGN_PENDING:
            return self.sweep_pending().to_dict()

        order_id = (order_id or "").strip()
        if not order_id:
            raise MissingOrderIdError("order_id is required for this action")

        if action == ACTION_REASSIGN:
            return self.reassign(order_id).to_dict()

        return self.assign(order_id).to_dict()
