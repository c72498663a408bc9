import pytest

from dispatch.dispatcher import (
    ACTION_ASSIGN_PENDING,
    AssignmentRequestError,
    Dispatcher,
    MissingOrderIdError,
    UnsupportedActionError,
)


def test_handle_defaults_to_assign(store, add_partner, add_order):
    add_partner("P1")
    add_order()

    response = Dispatcher(store).handle(order_id="order-1")

    assert response == {"assignedPartnerId": "P1", "status": "assigned"}


def test_handle_reassign(store, add_partner, add_order):
    add_partner("P1")
    add_order(delivery_status="delivered")

    response = Dispatcher(store).handle("reassign", "order-1")

    assert response == {"assignedPartnerId": None, "status": "no_reassignment_needed"}


def test_handle_assign_pending(store, add_partner, add_order):
    add_partner("P1")
    add_order("o1")
    add_order("o2", delivery_status="pending_assignment")

    # order_id is ignored for the sweep
    assert Dispatcher(store).handle(ACTION_ASSIGN_PENDING, "ignored") == {"processed": 2}


@pytest.mark.parametrize("order_id", [None, "", "   "])
@pytest.mark.parametrize("action", [None, "assign", "reassign"])
def test_handle_requires_order_id(store, action, order_id):
    with pytest.raises(MissingOrderIdError):
        Dispatcher(store).handle(action, order_id)

    assert store.writes == []


def test_handle_unsupported_action(store):
    with pytest.raises(UnsupportedActionError) as excinfo:
        Dispatcher(store).handle("teleport", "order-1")

    assert isinstance(excinfo.value, AssignmentRequestError)
    assert "teleport" in str(excinfo.value)


def test_handle_strips_order_id(store, add_partner, add_order):
    add_partner("P1")
    add_order()

    assert Dispatcher(store).handle("assign", "  order-1 ")["status"] == "assigned"
