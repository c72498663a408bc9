from typing import Optional

from orders.models import DeliveryStatus, Order, OrderStatus

# Partner-side progression once an order is assigned.
DELIVERY_FLOW = [
    DeliveryStatus.ASSIGNED.value,
    DeliveryStatus.ACCEPTED.value,
    DeliveryStatus.PICKUP_SCHEDULED.value,
    DeliveryStatus.PICKED_UP.value,
    DeliveryStatus.IN_TRANSIT.value,
    DeliveryStatus.DELIVERED.value,
    DeliveryStatus.COMPLETED.value,
]

COMPLETED_DELIVERY_STATUSES = {DeliveryStatus.DELIVERED.value, DeliveryStatus.COMPLETED.value}


class DeliveryStateException(Exception):
    """Raised when an invalid delivery transition is attempted."""
    pass


def _current_status(order: Order) -> str:
    # a bound order with no recorded delivery status is treated as freshly assigned
    return order.normalized_delivery_status or DeliveryStatus.ASSIGNED.value


def _require_partner(order: Order, partner_id: Optional[str]) -> None:
    if not order.delivery_partner_id:
        raise DeliveryStateException(f"Order {order.id} has no delivery partner")
    if partner_id is not None and order.delivery_partner_id != partner_id:
        raise DeliveryStateException(f"Order {order.id} is not assigned to partner {partner_id}")


def accept_delivery(order: Order, partner_id: Optional[str] = None) -> Order:
    """
    The assigned partner confirms the delivery: assigned -> accepted.
    """
    _require_partner(order, partner_id)
    if _current_status(order) != DeliveryStatus.ASSIGNED.value:
        raise DeliveryStateException(f"Cannot accept order {order.id} from {order.delivery_status}")

    order.delivery_status = DeliveryStatus.ACCEPTED.value
    return order


def reject_delivery(order: Order, partner_id: Optional[str] = None) -> Order:
    """
    The assigned partner declines: the order loses its partner and becomes
    eligible for reassignment.
    """
    _require_partner(order, partner_id)
    if _current_status(order) != DeliveryStatus.ASSIGNED.value:
        raise DeliveryStateException(f"Cannot reject order {order.id} from {order.delivery_status}")

    order.delivery_status = DeliveryStatus.REJECTED.value
    order.delivery_partner_id = None
    return order


def advance_delivery(order: Order, partner_id: Optional[str] = None) -> Order:
    """
    Move to the next step of DELIVERY_FLOW. An unrecognised status restarts at
    accepted. Reaching delivered/completed also marks the order delivered.
    """
    _require_partner(order, partner_id)
    current = _current_status(order)

    if current == DELIVERY_FLOW[-1]:
        raise DeliveryStateException(f"Order {order.id} delivery is already {current}")

    if current in DELIVERY_FLOW:
        next_status = DELIVERY_FLOW[DELIVERY_FLOW.index(current) + 1]
    else:
        next_status = DeliveryStatus.ACCEPTED.value

    order.delivery_status = next_status
    if next_status in COMPLETED_DELIVERY_STATUSES:
        order.status = OrderStatus.DELIVERED.value
    return order
