"""
Purpose: The store boundary the assignment engine talks to.
What it does:
- Declares AssignmentStore: the read queries plus the single atomic
  conditional write ("set partner where partner is still null") that the
  engine relies on for at-most-one assignment.
- Provides InMemoryAssignmentStore, used by the tests and the simulation
  script. Its lock emulates the row-level atomicity of the database UPDATE;
  production uses backend/logistics/store.py (Django ORM).

Rule: Stores return domain models (orders.models / partners.models), never ORM rows.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Protocol, Tuple

from orders.models import DeliveryStatus, Order, normalize_status
from partners.models import PartnerAvailability, PartnerProfile, PartnerStatus


class AssignmentStore(Protocol):
    """
    Everything the engine reads or writes. Implementations must make
    `claim_order` atomic at the store: of many concurrent claims on the same
    unassigned order, exactly one returns the partner id.
    """

    def get_order(self, order_id: str) -> Optional[Order]:
        ...

    def list_partner_availability(self, status: PartnerStatus) -> List[PartnerAvailability]:
        ...

    def get_partner_profiles(self, partner_ids: Iterable[str]) -> List[PartnerProfile]:
        ...

    def list_partner_deliveries(self, partner_ids: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
        """(partner_id, delivery_status) for every order bound to one of the partners."""
        ...

    def mark_pending_assignment(self, order_id: str, now: datetime) -> int:
        """Set delivery status to pending_assignment only if the order is still unassigned."""
        ...

    def claim_order(self, order_id: str, partner_id: str, now: datetime) -> Optional[str]:
        """Conditional write. Returns the now-set partner id, or None if zero rows matched."""
        ...

    def touch_partner_last_assigned(self, partner_id: str, now: datetime) -> None:
        ...

    def list_sweepable_orders(
        self,
        order_statuses: Iterable[str],
        delivery_statuses: Iterable[str],
    ) -> List[Order]:
        """Unassigned orders in one of the order statuses and delivery statuses ("" = unset)."""
        ...

    def save_delivery_progress(self, order: Order, expected_partner_id: str, now: datetime) -> int:
        """Partner-side lifecycle write, only while the order is still bound to that partner."""
        ...

    def close(self) -> None:
        """Release per-thread resources. Called by sweep worker threads when they finish an order."""
        ...


@dataclass
class InMemoryAssignmentStore:
    """
    In-memory AssignmentStore.

    Reads hand out copies so concurrent callers work on their own snapshot,
    the way separate database reads would.
    """
    _orders: Dict[str, Order] = field(default_factory=dict)
    _availability: Dict[str, PartnerAvailability] = field(default_factory=dict)
    _profiles: Dict[str, PartnerProfile] = field(default_factory=dict)
    _availability_updated_at: Dict[str, datetime] = field(default_factory=dict)
    _order_updated_at: Dict[str, datetime] = field(default_factory=dict)

    # every write as (operation, key), handy for asserting "no writes happened"
    writes: List[Tuple[str, str]] = field(default_factory=list)

    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    # --- Seeding helpers ---

    def add_order(self, order: Order) -> None:
        with self._lock:
            self._orders[order.id] = replace(order)

    def add_partner(self, availability: PartnerAvailability, profile: Optional[PartnerProfile] = None) -> None:
        with self._lock:
            self._availability[availability.partner_id] = availability
            if profile is not None:
                self._profiles[profile.partner_id] = profile

    def save_delivery_progress(self, order: Order, expected_partner_id: str, now: Optional[datetime] = None) -> int:
        """
        Persist a lifecycle transition (accept / reject / advance), guarded on the
        order still being bound to `expected_partner_id`. Returns rows written.
        """
        with self._lock:
            current = self._orders.get(order.id)
            if current is None or current.delivery_partner_id != expected_partner_id:
                return 0
            self._orders[order.id] = replace(order)
            self._order_updated_at[order.id] = now or datetime.now(timezone.utc)
            self.writes.append(("save_delivery_progress", order.id))
            return 1

    def set_partner_availability(self, availability: PartnerAvailability) -> None:
        with self._lock:
            self._availability[availability.partner_id] = availability
            self._availability_updated_at[availability.partner_id] = datetime.now(timezone.utc)
            self.writes.append(("set_partner_availability", availability.partner_id))

    def get_partner_availability(self, partner_id: str) -> Optional[PartnerAvailability]:
        with self._lock:
            return self._availability.get(partner_id)

    def order_updated_at(self, order_id: str) -> Optional[datetime]:
        with self._lock:
            return self._order_updated_at.get(order_id)

    def close(self) -> None:
        pass

    # --- AssignmentStore ---

    def get_order(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return replace(order) if order else None

    def list_partner_availability(self, status: PartnerStatus) -> List[PartnerAvailability]:
        with self._lock:
            return [record for record in self._availability.values() if record.status == status]

    def get_partner_profiles(self, partner_ids: Iterable[str]) -> List[PartnerProfile]:
        wanted = set(partner_ids)
        with self._lock:
            return [profile for partner_id, profile in self._profiles.items() if partner_id in wanted]

    def list_partner_deliveries(self, partner_ids: Iterable[str]) -> List[Tuple[str, Optional[str]]]:
        wanted = set(partner_ids)
        with self._lock:
            return [
                (order.delivery_partner_id, order.delivery_status)
                for order in self._orders.values()
                if order.delivery_partner_id in wanted
            ]

    def mark_pending_assignment(self, order_id: str, now: datetime) -> int:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None or order.delivery_partner_id is not None:
                return 0
            order.delivery_status = DeliveryStatus.PENDING_ASSIGNMENT.value
            self._order_updated_at[order_id] = now
            self.writes.append(("mark_pending_assignment", order_id))
            return 1

    def claim_order(self, order_id: str, partner_id: str, now: datetime) -> Optional[str]:
        # compare-and-set under one lock: the in-memory equivalent of
        # UPDATE ... WHERE id = %s AND delivery_partner_id IS NULL
        with self._lock:
            order = self._orders.get(order_id)
            if order is None or order.delivery_partner_id is not None:
                return None
            order.delivery_partner_id = partner_id
            order.delivery_status = DeliveryStatus.ASSIGNED.value
            self._order_updated_at[order_id] = now
            self.writes.append(("claim_order", order_id))
            return order.delivery_partner_id

    def touch_partner_last_assigned(self, partner_id: str, now: datetime) -> None:
        with self._lock:
            record = self._availability.get(partner_id)
            if record is None:
                return
            self._availability[partner_id] = replace(record, last_assigned_at=now)
            self._availability_updated_at[partner_id] = now
            self.writes.append(("touch_partner_last_assigned", partner_id))

    def list_sweepable_orders(
        self,
        order_statuses: Iterable[str],
        delivery_statuses: Iterable[str],
    ) -> List[Order]:
        order_statuses = {normalize_status(status) for status in order_statuses}
        delivery_statuses = {normalize_status(status) for status in delivery_statuses}
        with self._lock:
            return [
                replace(order)
                for order in self._orders.values()
                if order.delivery_partner_id is None
                and normalize_status(order.status) in order_statuses
                and normalize_status(order.delivery_status) in delivery_statuses
            ]
