import pytest
from common.choices import OrderEvent, OrderStatus
from common.exceptions import InvalidTransitionError
from orders.state import DISPUTABLE_STATES, TERMINAL_STATES, TRANSITIONS, is_terminal, next_status

EXPECTED = {
    (OrderStatus.PENDING, OrderEvent.ACTIVATE): OrderStatus.ACTIVE,
    (OrderStatus.PENDING, OrderEvent.CANCEL): OrderStatus.CANCELLED,
    (OrderStatus.ACTIVE, OrderEvent.CONFIRM_DELIVERY): OrderStatus.COMPLETED,
    (OrderStatus.ACTIVE, OrderEvent.OPEN_DISPUTE): OrderStatus.DISPUTED,
    (OrderStatus.COMPLETED, OrderEvent.OPEN_DISPUTE): OrderStatus.DISPUTED,
    (OrderStatus.DISPUTED, OrderEvent.RESOLVE_REFUND): OrderStatus.RESOLVED_REFUND,
    (OrderStatus.DISPUTED, OrderEvent.RESOLVE_PARTIAL_REFUND): OrderStatus.RESOLVED_PARTIAL_REFUND,
    (OrderStatus.DISPUTED, OrderEvent.RESOLVE_RELEASE): OrderStatus.RESOLVED_RELEASE,
}


@pytest.mark.parametrize("current", OrderStatus.values)
@pytest.mark.parametrize("event", OrderEvent.values)
def test_every_state_event_pair_is_defined(current, event):
    expected = EXPECTED.get((current, event))
    if expected is None:
        with pytest.raises(InvalidTransitionError):
            next_status(current, event)
    else:
        assert next_status(current, event) == expected


def test_terminal_states_have_no_outgoing_transitions():
    for sources, _target in TRANSITIONS.values():
        assert not (sources & TERMINAL_STATES)
    assert is_terminal(OrderStatus.CANCELLED)
    assert not is_terminal(OrderStatus.COMPLETED)


def test_only_active_and_completed_orders_are_disputable():
    assert DISPUTABLE_STATES == {OrderStatus.ACTIVE, OrderStatus.COMPLETED}


def test_unknown_event_is_rejected():
    with pytest.raises(InvalidTransitionError):
        next_status(OrderStatus.PENDING, "teleport")
