"""
Return and exchange workflow.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import InvalidTransition, NotFound, Unauthorized, ValidationError
from apps.common.notifications import notify, RETURN_REQUESTED, RETURN_UPDATE
from .. import state_machine
from ..models import Order, ReturnExchangeRequest

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('audit')

REQUEST_TYPES = (ReturnExchangeRequest.TYPE_RETURN, ReturnExchangeRequest.TYPE_EXCHANGE)


class ReturnService:
    """Customer requests and admin/agent status updates"""

    @staticmethod
    def _locked(order_id):
        """Lock an order and its return record; call inside atomic()"""
        try:
            order = Order.objects.select_for_update().get(id=order_id)
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_id} not found")
        ReturnExchangeRequest.objects.get_or_create(order=order)
        request = ReturnExchangeRequest.objects.select_for_update().get(order=order)
        return order, request

    @staticmethod
    def request_return_exchange(user, order_id, request_type, reason, notifier=None) -> ReturnExchangeRequest:
        """
        File a return or exchange for a delivered order.

        Raises:
            ValidationError: Unknown type or empty reason
            Unauthorized: user does not own the order
            InvalidTransition: Not delivered, or a request already exists
        """
        if request_type not in REQUEST_TYPES:
            raise ValidationError("Request type must be 'return' or 'exchange'")
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError("A reason is required")

        with transaction.atomic():
            order, request = ReturnService._locked(order_id)
            if order.user_id != user.id:
                raise Unauthorized("Only the customer who placed the order can request a return")
            if not order.is_delivered:
                raise InvalidTransition("Returns and exchanges can only be requested after delivery")
            state_machine.transition(
                state_machine.RETURN_EXCHANGE, request.state, state_machine.RETURN_PENDING
            )

            request.request_type = request_type
            request.status = ReturnExchangeRequest.STATUS_PENDING
            request.reason = reason
            request.requested_at = timezone.now()
            request.save()

        logger.info(f"{request_type.title()} requested for order {order.order_ref}")
        notify(
            user, RETURN_REQUESTED,
            f"Your {request_type} request for order {order.order_ref} has been received.",
            notifier=notifier, order_ref=order.order_ref,
        )
        return request

    @staticmethod
    def actor_role(actor, order):
        """Role under which actor may drive the return workflow of order"""
        if actor.is_admin_role:
            return state_machine.ROLE_ADMIN
        agent = getattr(actor, 'delivery_profile', None) if actor.is_delivery_agent else None
        if agent is not None and order.delivery_agent_id == agent.id:
            return state_machine.ROLE_DELIVERY
        raise Unauthorized("Only an admin or the assigned delivery agent can update this request")

    @staticmethod
    def update_status(actor, order_id, status, admin_comment='', notifier=None) -> ReturnExchangeRequest:
        """
        Move a return/exchange request to a new status.

        Completing a return marks the order refunded in the same
        transaction. Exchanges never set the refund flag.

        Raises:
            ValidationError: Unknown status
            Unauthorized: Role may not set this status
            InvalidTransition: No such edge from the current status
        """
        if status not in dict(ReturnExchangeRequest.STATUS_CHOICES):
            raise ValidationError(f"Unknown status '{status}'")

        with transaction.atomic():
            order, request = ReturnService._locked(order_id)
            role = ReturnService.actor_role(actor, order)
            if not state_machine.role_may_set_return_status(role, status):
                raise Unauthorized(f"{role.title()} cannot set a request to '{status}'")
            previous = request.state
            state_machine.transition(state_machine.RETURN_EXCHANGE, previous, status)

            request.status = status
            if admin_comment:
                request.admin_comment = admin_comment
            request.save()

            if status == ReturnExchangeRequest.STATUS_COMPLETED \
                    and request.request_type == ReturnExchangeRequest.TYPE_RETURN:
                order.is_refunded = True
                order.refunded_at = timezone.now()
                order.save(update_fields=['is_refunded', 'refunded_at', 'updated_at'])

        audit_logger.info(
            f"{role}={actor.id} moved {request.request_type} on order {order.order_ref} "
            f"from {previous} to {status}"
        )
        notify(
            order.user, RETURN_UPDATE,
            f"Your {request.request_type} request for order {order.order_ref} is now {status}.",
            notifier=notifier, order_ref=order.order_ref, status=status,
        )
        return request
