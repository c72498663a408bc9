import pytest

from dispatch.state_machines.delivery_state import (
    DELIVERY_FLOW,
    DeliveryStateException,
    accept_delivery,
    advance_delivery,
    reject_delivery,
)
from dispatch.state_machines.partner_state import PartnerStateException, set_availability
from orders.models import Order
from partners.models import PartnerAvailability, PartnerStatus


def bound_order(delivery_status="assigned", partner_id="P1"):
    return Order(id="order-1", status="confirmed", delivery_status=delivery_status, delivery_partner_id=partner_id)


def test_accept_delivery():
    order = accept_delivery(bound_order(), "P1")
    assert order.delivery_status == "accepted"
    assert order.delivery_partner_id == "P1"


def test_accept_treats_unset_status_as_assigned():
    assert accept_delivery(bound_order(delivery_status=None)).delivery_status == "accepted"


def test_accept_requires_assigned_status():
    with pytest.raises(DeliveryStateException):
        accept_delivery(bound_order(delivery_status="in_transit"), "P1")


def test_only_the_bound_partner_may_act():
    with pytest.raises(DeliveryStateException):
        accept_delivery(bound_order(), "P2")

    with pytest.raises(DeliveryStateException):
        advance_delivery(bound_order(partner_id=None))


def test_reject_delivery_releases_partner():
    order = reject_delivery(bound_order(), "P1")

    assert order.delivery_status == "rejected"
    assert order.delivery_partner_id is None


def test_reject_after_accept_is_refused():
    with pytest.raises(DeliveryStateException):
        reject_delivery(bound_order(delivery_status="accepted"), "P1")


def test_advance_walks_the_whole_flow():
    order = bound_order()
    seen = []
    while order.delivery_status != DELIVERY_FLOW[-1]:
        order = advance_delivery(order, "P1")
        seen.append(order.delivery_status)

    assert seen == DELIVERY_FLOW[1:]
    assert order.status == "delivered"

    with pytest.raises(DeliveryStateException):
        advance_delivery(order, "P1")


def test_advance_marks_order_delivered_on_delivery():
    order = advance_delivery(bound_order(delivery_status="in_transit"))

    assert order.delivery_status == "delivered"
    assert order.status == "delivered"


def test_advance_from_unknown_status_restarts_at_accepted():
    order = advance_delivery(bound_order(delivery_status="rejected"))
    assert order.delivery_status == "accepted"
    assert order.status == "confirmed"


def test_set_availability():
    record = PartnerAvailability.new("P1", PartnerStatus.AVAILABLE)

    busy = set_availability(record, " Busy ")
    offline = set_availability(busy, PartnerStatus.OFFLINE)

    assert busy.status == PartnerStatus.BUSY
    assert offline.status == PartnerStatus.OFFLINE
    # the original record is untouched
    assert record.status == PartnerStatus.AVAILABLE


def test_set_availability_rejects_unknown_status():
    with pytest.raises(PartnerStateException):
        set_availability(PartnerAvailability.new("P1"), "napping")
