"""
Payment capture and delivery confirmation.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.common.exceptions import InvalidTransition, NotFound, Unauthorized, ValidationError
from apps.common.notifications import notify, ORDER_DELIVERED, COD_COLLECTED
from apps.payments.verifier import PaymentVerifier
from .. import state_machine
from ..models import Order

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('audit')


class FulfillmentService:
    """Delivery agent and payment callback operations on an order"""

    @staticmethod
    def _locked_order(order_id):
        """Load an order under select_for_update; call inside atomic()"""
        try:
            return Order.objects.select_for_update().get(id=order_id)
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_id} not found")

    @staticmethod
    def _require_agent(user, order):
        """
        The acting delivery agent. When the order has an assigned agent,
        only that agent may act on it.
        """
        agent = getattr(user, 'delivery_profile', None) if user.is_delivery_agent else None
        if agent is None:
            raise Unauthorized("Only delivery agents can perform this action")
        if order.delivery_agent_id is not None and order.delivery_agent_id != agent.id:
            raise Unauthorized("This order is assigned to another delivery agent")
        return agent

    @staticmethod
    def mark_delivered(agent_user, order_id, notifier=None) -> Order:
        """
        Confirm delivery.

        Raises:
            InvalidTransition: Already delivered, or a cash-on-delivery order
                whose payment has not been collected
        """
        with transaction.atomic():
            order = FulfillmentService._locked_order(order_id)
            agent = FulfillmentService._require_agent(agent_user, order)

            state_machine.transition(
                state_machine.DELIVERY, state_machine.delivery_state(order), state_machine.DELIVERED
            )
            if order.is_cod and not order.cod_payment_received:
                raise InvalidTransition(
                    "Collect the cash-on-delivery payment before marking the order delivered"
                )

            order.is_delivered = True
            order.delivered_at = timezone.now()
            order.save(update_fields=['is_delivered', 'delivered_at', 'updated_at'])

        audit_logger.info(f"agent={agent.id} delivered order {order.order_ref}")
        notify(
            order.user, ORDER_DELIVERED,
            f"Your order {order.order_ref} has been delivered.",
            notifier=notifier, order_ref=order.order_ref,
        )
        return order

    @staticmethod
    def record_cod_payment(agent_user, order_id, notifier=None) -> Order:
        """
        Record the cash collected for a cash-on-delivery order.

        Collection also settles the payment sub-state.

        Raises:
            ValidationError: Order is not cash on delivery
            InvalidTransition: Payment already collected
        """
        with transaction.atomic():
            order = FulfillmentService._locked_order(order_id)
            agent = FulfillmentService._require_agent(agent_user, order)

            if not order.is_cod:
                raise ValidationError("This order is not a cash-on-delivery order")
            if order.cod_payment_received:
                raise InvalidTransition("Cash-on-delivery payment already collected")
            state_machine.transition(
                state_machine.PAYMENT, state_machine.payment_state(order), state_machine.PAID
            )

            now = timezone.now()
            order.cod_payment_received = True
            order.cod_payment_received_at = now
            order.is_paid = True
            order.paid_at = now
            order.save(update_fields=[
                'cod_payment_received', 'cod_payment_received_at',
                'is_paid', 'paid_at', 'updated_at'
            ])

        audit_logger.info(f"agent={agent.id} collected COD {order.amount_paid} for order {order.order_ref}")
        notify(
            order.user, COD_COLLECTED,
            f"We received your payment of {order.amount_paid} for order {order.order_ref}.",
            notifier=notifier, order_ref=order.order_ref,
        )
        return order

    @staticmethod
    def confirm_payment(user, order_id, payment_payload, verifier=None) -> Order:
        """
        Settle a prepaid order from a verified gateway callback.

        Raises:
            Unauthorized: user is neither the owner nor an admin
            ValidationError: Order is cash on delivery
            InvalidTransition: Already paid
            PaymentVerificationFailed: Signature mismatch
        """
        verifier = verifier or PaymentVerifier()
        with transaction.atomic():
            order = FulfillmentService._locked_order(order_id)
            if order.user_id != user.id and not user.is_admin_role:
                raise Unauthorized("You are not allowed to pay for this order")
            if order.is_cod:
                raise ValidationError("Cash-on-delivery orders are paid to the delivery agent")
            state_machine.transition(
                state_machine.PAYMENT, state_machine.payment_state(order), state_machine.PAID
            )

            result = verifier.verify(order.order_ref, payment_payload)
            result['update_time'] = timezone.now().isoformat()

            order.is_paid = True
            order.paid_at = timezone.now()
            order.payment_result = result
            order.save(update_fields=['is_paid', 'paid_at', 'payment_result', 'updated_at'])

        audit_logger.info(f"user={user.id} confirmed payment {result['id']} for order {order.order_ref}")
        return order
