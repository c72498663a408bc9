"""
Purpose: Domain models for the Orders capability.
What it does:
- Defines core data structures:
- Order (id, lifecycle status, delivery status, assigned partner, address, total price)
- DeliveryAddress (city, state, optional lat/lon)

Defines enums/constants:
- OrderStatus = pending | confirmed | dispatched | delivered | cancelled
- DeliveryStatus = pending_assignment | assigned | accepted | rejected | ... | completed

Rule: No store access, no assignment logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class DeliveryStatus(str, Enum):
    """
    Delivery progress of an order, separate from the order lifecycle.
    An order with no delivery status yet has `delivery_status = None`.
    """
    PENDING_ASSIGNMENT = "pending_assignment"
    ASSIGNED = "assigned"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    PICKUP_SCHEDULED = "pickup_scheduled"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    COMPLETED = "completed"


def normalize_status(value) -> str:
    """
    Trimmed, lower-cased status text. None / enum members are accepted.
    """
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


@dataclass(frozen=True)
class DeliveryAddress:
    """
    Geocoded delivery location. Coordinates may be unknown.
    """
    city: Optional[str] = None
    state: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


@dataclass
class Order:
    """
    One customer purchase requiring delivery.

    `delivery_partner_id` is set iff the delivery status is `assigned` or later.
    """

    id: str
    status: str = OrderStatus.PENDING.value
    delivery_status: Optional[str] = None
    delivery_partner_id: Optional[str] = None
    delivery_address_id: Optional[str] = None
    total_price: Decimal = Decimal("0")

    address: Optional[DeliveryAddress] = None

    @property
    def normalized_delivery_status(self) -> str:
        return normalize_status(self.delivery_status)

    @property
    def is_assigned(self) -> bool:
        return bool(self.delivery_partner_id)
