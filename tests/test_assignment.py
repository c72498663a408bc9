import threading
from concurrent.futures import ThreadPoolExecutor

from dispatch.assignment import AssignmentResult, AssignmentStatus, assign_delivery_partner
from dispatch.store import InMemoryAssignmentStore
from partners.models import PartnerStatus

from conftest import MUMBAI, make_order, make_partner


class BarrierStore(InMemoryAssignmentStore):
    """
    Holds every claim until `parties` callers have read the order as
    unassigned, so all of them race on the conditional write.
    """
    def __init__(self, parties: int):
        super().__init__()
        self.barrier = threading.Barrier(parties, timeout=5)

    def claim_order(self, order_id, partner_id, now):
        self.barrier.wait()
        return super().claim_order(order_id, partner_id, now)


def test_assign_binds_same_city_partner(store, add_partner, add_order, fixed_now):
    add_partner("P2", city="Mumbai", location=MUMBAI)
    add_partner("P1", city="Pune")
    add_order("order-1", city="Pune")

    result = assign_delivery_partner(store, "order-1", now=fixed_now)

    assert result == AssignmentResult("P1", AssignmentStatus.ASSIGNED)
    assert result.to_dict() == {"assignedPartnerId": "P1", "status": "assigned"}

    order = store.get_order("order-1")
    assert order.delivery_partner_id == "P1"
    assert order.delivery_status == "assigned"
    assert store.order_updated_at("order-1") == fixed_now


def test_assign_stamps_last_assigned_at(store, add_partner, add_order, fixed_now):
    add_partner("P1")
    add_order()

    assign_delivery_partner(store, "order-1", now=fixed_now)

    assert store.get_partner_availability("P1").last_assigned_at == fixed_now
    assert store.writes == [
        ("claim_order", "order-1"),
        ("touch_partner_last_assigned", "P1"),
    ]


def test_assign_already_assigned_makes_no_writes(store, add_partner, add_order):
    add_partner("P1")
    add_order(delivery_partner_id="X", delivery_status="accepted")

    result = assign_delivery_partner(store, "order-1")

    assert result.to_dict() == {"assignedPartnerId": "X", "status": "already_assigned"}
    assert store.writes == []


def test_assign_with_nobody_available_parks_order(store, add_partner, add_order):
    add_partner("P1", status=PartnerStatus.OFFLINE)
    add_order()

    result = assign_delivery_partner(store, "order-1")

    assert result.to_dict() == {"assignedPartnerId": None, "status": "no_available_partners"}
    order = store.get_order("order-1")
    assert order.delivery_status == "pending_assignment"
    assert order.delivery_partner_id is None


def test_assign_available_partner_without_profile_is_no_candidates(store, add_partner, add_order):
    add_partner("P1", with_profile=False)
    add_order()

    result = assign_delivery_partner(store, "order-1")

    assert result.status == AssignmentStatus.NO_CANDIDATES
    assert store.get_order("order-1").delivery_status == "pending_assignment"


def test_assign_unknown_order(store, add_partner):
    add_partner("P1")

    result = assign_delivery_partner(store, "missing")

    assert result.to_dict() == {"assignedPartnerId": None, "status": "order_not_found"}
    assert store.writes == []


def test_assign_spreads_work_by_load(store, add_partner, add_order):
    """
    Three orders, two partners: the second order goes to the idle partner,
    the third to whoever was assigned longest ago among the least loaded.
    """
    add_partner("P1")
    add_partner("P2")
    for order_id in ("o1", "o2", "o3"):
        add_order(order_id)

    first = assign_delivery_partner(store, "o1")
    second = assign_delivery_partner(store, "o2")

    # 1. nobody has work yet, input order breaks the tie
    assert first.assigned_partner_id == "P1"
    # 2. P1 now carries one active delivery
    assert second.assigned_partner_id == "P2"

    third = assign_delivery_partner(store, "o3")
    assert third.status == AssignmentStatus.ASSIGNED
    assert third.assigned_partner_id in {"P1", "P2"}


def test_concurrent_assign_exactly_one_wins():
    store = BarrierStore(parties=2)
    partner = make_partner("P1")
    store.add_partner(partner.availability, partner.profile)
    store.add_order(make_order("order-1"))

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(lambda _: assign_delivery_partner(store, "order-1"), range(2)))

    statuses = sorted(result.status.value for result in results)
    assert statuses == ["assigned", "race_lost_or_already_assigned"]
    assert [op for op, _ in store.writes].count("claim_order") == 1
    assert store.get_order("order-1").delivery_partner_id == "P1"


def test_many_concurrent_callers_claim_at_most_once(store, add_partner, add_order):
    for partner_index in range(5):
        add_partner(f"P{partner_index}")
    add_order()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: assign_delivery_partner(store, "order-1"), range(24)))

    winners = [result for result in results if result.status == AssignmentStatus.ASSIGNED]
    assert len(winners) == 1
    assert [op for op, _ in store.writes].count("claim_order") == 1

    # every loser saw either the race or the already-bound partner
    for result in results:
        if result is winners[0]:
            continue
        assert result.status in {
            AssignmentStatus.RACE_LOST_OR_ALREADY_ASSIGNED,
            AssignmentStatus.ALREADY_ASSIGNED,
        }
        if result.status == AssignmentStatus.ALREADY_ASSIGNED:
            assert result.assigned_partner_id == winners[0].assigned_partner_id


def test_mark_pending_assignment_skips_bound_order(store, add_order, fixed_now):
    add_order(delivery_partner_id="P1", delivery_status="assigned")

    assert store.mark_pending_assignment("order-1", fixed_now) == 0

    order = store.get_order("order-1")
    assert order.delivery_status == "assigned"
    assert order.delivery_partner_id == "P1"
    assert store.writes == []


def test_claim_order_on_bound_order_returns_none(store, add_order, fixed_now):
    add_order()

    assert store.claim_order("order-1", "P1", fixed_now) == "P1"
    assert store.claim_order("order-1", "P2", fixed_now) is None
    assert store.get_order("order-1").delivery_partner_id == "P1"


def test_partner_at_infinite_coordinates_is_still_assignable(store, add_partner, add_order):
    add_partner("P1", location=(float("inf"), 73.8567))
    add_order()

    result = assign_delivery_partner(store, "order-1")

    assert result.to_dict() == {"assignedPartnerId": "P1", "status": "assigned"}
