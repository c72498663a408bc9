from datetime import datetime, timezone
from typing import Optional

import pytest

from dispatch.store import InMemoryAssignmentStore
from orders.models import DeliveryAddress, Order
from partners.models import AvailablePartner, PartnerAvailability, PartnerProfile, PartnerStatus

# Pune city centre and a point ~3km away
PUNE = (18.5204, 73.8567)
PUNE_KOTHRUD = (18.5074, 73.8077)
MUMBAI = (19.0760, 72.8777)


def make_partner(
    partner_id: str,
    city: Optional[str] = "Pune",
    state: Optional[str] = "Maharashtra",
    location=PUNE,
    status: PartnerStatus = PartnerStatus.AVAILABLE,
    last_assigned_at: Optional[datetime] = None,
) -> AvailablePartner:
    latitude, longitude = location if location else (None, None)
    return AvailablePartner(
        availability=PartnerAvailability.new(partner_id, status, last_assigned_at),
        profile=PartnerProfile(partner_id, city, state, latitude, longitude),
    )


def make_order(
    order_id: str = "order-1",
    city: Optional[str] = "Pune",
    state: Optional[str] = "Maharashtra",
    location=PUNE,
    **fields,
) -> Order:
    latitude, longitude = location if location else (None, None)
    return Order(
        id=order_id,
        address=DeliveryAddress(city=city, state=state, latitude=latitude, longitude=longitude),
        **fields,
    )


@pytest.fixture
def store():
    return InMemoryAssignmentStore()


@pytest.fixture
def add_partner(store):
    """
    Seeds a partner into the store and returns it.
    """
    def _add(partner_id: str, with_profile: bool = True, **kwargs) -> AvailablePartner:
        partner = make_partner(partner_id, **kwargs)
        store.add_partner(partner.availability, partner.profile if with_profile else None)
        return partner

    return _add


@pytest.fixture
def add_order(store):
    def _add(order_id: str = "order-1", **kwargs) -> Order:
        order = make_order(order_id, **kwargs)
        store.add_order(order)
        return order

    return _add


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
