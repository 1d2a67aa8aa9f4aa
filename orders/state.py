"""Order lifecycle transition table."""

from typing import Dict, FrozenSet, Tuple

from common.choices import OrderEvent, OrderStatus
from common.exceptions import InvalidTransitionError

# event -> (allowed source states, target state)
TRANSITIONS: Dict[str, Tuple[FrozenSet[str], str]] = {
    OrderEvent.ACTIVATE: (frozenset({OrderStatus.PENDING}), OrderStatus.ACTIVE),
    OrderEvent.CONFIRM_DELIVERY: (frozenset({OrderStatus.ACTIVE}), OrderStatus.COMPLETED),
    OrderEvent.OPEN_DISPUTE: (frozenset({OrderStatus.ACTIVE, OrderStatus.COMPLETED}), OrderStatus.DISPUTED),
    OrderEvent.RESOLVE_REFUND: (frozenset({OrderStatus.DISPUTED}), OrderStatus.RESOLVED_REFUND),
    OrderEvent.RESOLVE_PARTIAL_REFUND: (frozenset({OrderStatus.DISPUTED}), OrderStatus.RESOLVED_PARTIAL_REFUND),
    OrderEvent.RESOLVE_RELEASE: (frozenset({OrderStatus.DISPUTED}), OrderStatus.RESOLVED_RELEASE),
    OrderEvent.CANCEL: (frozenset({OrderStatus.PENDING}), OrderStatus.CANCELLED),
}

TERMINAL_STATES = frozenset(
    {
        OrderStatus.RESOLVED_REFUND,
        OrderStatus.RESOLVED_PARTIAL_REFUND,
        OrderStatus.RESOLVED_RELEASE,
        OrderStatus.CANCELLED,
    }
)

DISPUTABLE_STATES = TRANSITIONS[OrderEvent.OPEN_DISPUTE][0]


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def next_status(current: str, event: str) -> str:
    """Return the target state for `event` from `current` or raise."""

    try:
        sources, target = TRANSITIONS[event]
    except KeyError:
        raise InvalidTransitionError()
    if current not in sources:
        raise InvalidTransitionError()
    return target
