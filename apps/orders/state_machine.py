"""
Order sub-state machines.

An order carries three independent sub-states. Each one is a small
transition table; every status change made by the services goes through
transition(), which either returns the new state or raises
InvalidTransition without touching the order.

    payment:   unpaid -> paid
    delivery:  pending -> delivered
    return:    none -> pending -> approved -> pickedUp -> completed
                               -> rejected
"""
from apps.common.exceptions import InvalidTransition

UNPAID = 'unpaid'
PAID = 'paid'

PENDING_DELIVERY = 'pending'
DELIVERED = 'delivered'

RETURN_NONE = 'none'
RETURN_PENDING = 'pending'
RETURN_APPROVED = 'approved'
RETURN_REJECTED = 'rejected'
RETURN_PICKED_UP = 'pickedUp'
RETURN_COMPLETED = 'completed'


class Machine:
    """A named transition table"""

    def __init__(self, name, transitions):
        self.name = name
        self.transitions = {state: frozenset(targets) for state, targets in transitions.items()}

    def allowed(self, current):
        return self.transitions.get(current, frozenset())

    def can(self, current, target):
        return target in self.allowed(current)

    def __repr__(self):
        return f"Machine({self.name!r})"


PAYMENT = Machine('payment', {
    UNPAID: {PAID},
})

DELIVERY = Machine('delivery', {
    PENDING_DELIVERY: {DELIVERED},
})

RETURN_EXCHANGE = Machine('return_exchange', {
    RETURN_NONE: {RETURN_PENDING},
    RETURN_PENDING: {RETURN_APPROVED, RETURN_REJECTED},
    RETURN_APPROVED: {RETURN_PICKED_UP},
    RETURN_PICKED_UP: {RETURN_COMPLETED},
})

# Statuses each role may move a return/exchange request into
ROLE_ADMIN = 'admin'
ROLE_DELIVERY = 'delivery'

RETURN_STATUS_ROLES = {
    ROLE_ADMIN: frozenset({RETURN_APPROVED, RETURN_REJECTED, RETURN_PICKED_UP, RETURN_COMPLETED}),
    ROLE_DELIVERY: frozenset({RETURN_PICKED_UP, RETURN_COMPLETED}),
}


def transition(machine, current, target):
    """
    Validate a move in a sub-machine.

    Returns:
        The target state

    Raises:
        InvalidTransition: If the table has no edge from current to target
    """
    if not machine.can(current, target):
        raise InvalidTransition(
            f"Cannot move {machine.name} from '{current}' to '{target}'"
        )
    return target


def payment_state(order):
    return PAID if order.is_paid else UNPAID


def delivery_state(order):
    return DELIVERED if order.is_delivered else PENDING_DELIVERY


def return_state(order):
    request = getattr(order, 'return_request', None)
    return request.state if request is not None else RETURN_NONE


def role_may_set_return_status(role, status):
    return status in RETURN_STATUS_ROLES.get(role, frozenset())
