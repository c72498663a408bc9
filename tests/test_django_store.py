from datetime import datetime, timezone
from decimal import Decimal

import pytest

from logistics.models import CustomerAddress, CustomerOrder, DeliveryPartnerStatus
from logistics.store import DjangoAssignmentStore
from partners.models import PartnerStatus
from users.models import User

pytestmark = pytest.mark.django_db

NOW = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def customer():
    return User.objects.create_user(username="asha", password="pw", role=User.Roles.CUSTOMER)


def make_rider(username):
    return User.objects.create_user(username=username, password="pw", role=User.Roles.LOGISTICS)


@pytest.fixture
def order(customer):
    address = CustomerAddress.objects.create(
        customer=customer, address_line="12 FC Road", city="Pune", state="Maharashtra",
    )
    return CustomerOrder.objects.create(customer=customer, delivery_address=address, total_price=Decimal("99.00"))


def test_claim_order_sets_partner_once(order):
    first = make_rider("first")
    second = make_rider("second")
    store = DjangoAssignmentStore()

    assert store.claim_order(str(order.id), str(first.pk), NOW) == str(first.pk)
    # the row is bound now, so the guarded UPDATE matches nothing
    assert store.claim_order(str(order.id), str(second.pk), NOW) is None

    order.refresh_from_db()
    assert order.delivery_partner_id == first.pk
    assert order.delivery_status == "assigned"


def test_claim_order_unknown_order_returns_none():
    rider = make_rider("rider")

    assert DjangoAssignmentStore().claim_order("6f1c1a52-8a5e-4a52-9a55-0d1f3c7b0a11", str(rider.pk), NOW) is None


def test_mark_pending_assignment_leaves_bound_order_alone(order):
    rider = make_rider("rider")
    store = DjangoAssignmentStore()
    store.claim_order(str(order.id), str(rider.pk), NOW)

    assert store.mark_pending_assignment(str(order.id), NOW) == 0

    order.refresh_from_db()
    assert order.delivery_status == "assigned"
    assert order.delivery_partner_id == rider.pk


def test_mark_pending_assignment_parks_unbound_order(order):
    assert DjangoAssignmentStore().mark_pending_assignment(str(order.id), NOW) == 1

    order.refresh_from_db()
    assert order.delivery_status == "pending_assignment"


def test_available_partners_come_back_in_partner_id_order():
    """
    Rows are inserted out of id order; the listing is still sorted by partner id
    so full ranking ties resolve the same way on every read.
    """
    riders = [make_rider(name) for name in ("amit", "bina", "chetan")]
    for rider in reversed(riders):
        DeliveryPartnerStatus.objects.create(partner=rider, status="available")
    DeliveryPartnerStatus.objects.filter(partner=riders[1]).update(status="busy")

    records = DjangoAssignmentStore().list_partner_availability(PartnerStatus.AVAILABLE)

    assert [record.partner_id for record in records] == [str(riders[0].pk), str(riders[2].pk)]
