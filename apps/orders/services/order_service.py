"""
Core order service for order creation and queries.
"""
import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.db import transaction

from apps.common.exceptions import NotFound, Unauthorized, ValidationError
from apps.common.notifications import notify, ORDER_CONFIRMATION
from apps.common.utils import normalize_pincode
from apps.delivery.services import AssignmentService
from apps.loyalty.services import LoyaltyLedger
from ..models import Order, OrderItem, ReturnExchangeRequest

logger = logging.getLogger(__name__)

REQUIRED_ADDRESS_FIELDS = ('city', 'pincode')


def _to_decimal(value, field):
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


class OrderService:
    """Service class for core order business logic"""

    @staticmethod
    def generate_order_ref() -> str:
        return f"JW{uuid.uuid4().hex[:12].upper()}"

    @staticmethod
    def validate_order_items(items: List[Dict]) -> List[Dict]:
        """
        Check the item list and normalise each line.

        Raises:
            ValidationError: Empty list, missing fields, or non-positive
                quantity or price
        """
        if not items:
            raise ValidationError("Order must contain at least one item")

        lines = []
        for item in items:
            if not all(key in item for key in ('product_id', 'quantity', 'price')):
                raise ValidationError("Each item must have product_id, quantity, and price")

            quantity = item['quantity']
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
                raise ValidationError("Quantity must be a positive whole number")
            price = _to_decimal(item['price'], 'price')
            if price <= 0:
                raise ValidationError("Price must be greater than 0")

            lines.append({
                'product_id': str(item['product_id']),
                'name': item.get('name', ''),
                'quantity': quantity,
                'price': price,
                'amount': price * quantity,
            })
        return lines

    @staticmethod
    def validate_shipping_address(address: Dict) -> Dict:
        if not isinstance(address, dict):
            raise ValidationError("Shipping address is required")
        missing = [field for field in REQUIRED_ADDRESS_FIELDS if not str(address.get(field) or '').strip()]
        if missing:
            raise ValidationError(f"Shipping address is missing: {', '.join(missing)}")

        address = dict(address)
        address['city'] = str(address['city']).strip()
        address['pincode'] = normalize_pincode(address['pincode'])
        return address

    @staticmethod
    def create_order(user, items: List[Dict], shipping_address: Dict, payment_method: str,
                     reward_points_to_redeem: int = 0, shipping_price=0, tax_price=0,
                     ledger: Optional[LoyaltyLedger] = None, notifier=None) -> Order:
        """
        Place an order.

        Input is validated and a delivery agent chosen before anything is
        written. The order, its items, its return record, the points
        redemption and the points award are then saved in one transaction:
        if the redemption fails nothing is kept.

        Raises:
            ValidationError: Bad items, address, payment method or amounts
            InsufficientBalance: Points redemption refused
        """
        lines = OrderService.validate_order_items(items)
        address = OrderService.validate_shipping_address(shipping_address)
        if payment_method not in dict(Order.PAYMENT_METHOD_CHOICES):
            raise ValidationError(f"Unknown payment method '{payment_method}'")

        shipping_price = _to_decimal(shipping_price or 0, 'shipping_price')
        tax_price = _to_decimal(tax_price or 0, 'tax_price')
        if shipping_price < 0 or tax_price < 0:
            raise ValidationError("Shipping and tax cannot be negative")

        points = int(reward_points_to_redeem or 0)
        if points < 0:
            raise ValidationError("Reward points to redeem cannot be negative")

        ledger = ledger or LoyaltyLedger(notifier=notifier)
        items_price = sum((line['amount'] for line in lines), Decimal('0.00'))
        total_price = items_price + shipping_price + tax_price
        if points and ledger.discount_for(points) > total_price:
            raise ValidationError("Points discount cannot exceed the order total")

        agent = AssignmentService.assign_agent(address['city'], address['pincode'])

        with transaction.atomic():
            order = Order.objects.create(
                order_ref=OrderService.generate_order_ref(),
                user=user,
                shipping_address=address,
                payment_method=payment_method,
                items_price=items_price,
                shipping_price=shipping_price,
                tax_price=tax_price,
                total_price=total_price,
                amount_paid=total_price,
                delivery_agent=agent,
            )
            OrderItem.objects.bulk_create([
                OrderItem(order=order, **line) for line in lines
            ])
            ReturnExchangeRequest.objects.create(order=order)

            if points:
                discount = ledger.redeem_points(user, points, order=order)
                order.reward_points_used = points
                order.reward_discount_amount = discount
                order.points_discount = discount
                order.amount_paid = max(total_price - discount, Decimal('0.00'))
                order.save(update_fields=[
                    'reward_points_used', 'reward_discount_amount',
                    'points_discount', 'amount_paid', 'updated_at'
                ])

            ledger.award_points(user, order.amount_paid, order=order)

        if agent is None:
            logger.warning(f"Order {order.order_ref} created without a delivery agent")
        logger.info(f"Order {order.order_ref} created for user {user.id}, total {total_price}")

        notify(
            user, ORDER_CONFIRMATION,
            f"Your order {order.order_ref} has been placed. Amount due: {order.amount_paid}",
            notifier=notifier, order_ref=order.order_ref,
        )
        return order

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return (
                Order.objects
                .select_related('user', 'delivery_agent', 'return_request')
                .prefetch_related('items')
                .get(id=order_id)
            )
        except Order.DoesNotExist:
            raise NotFound(f"Order {order_id} not found")

    @staticmethod
    def is_assigned_agent(user, order: Order) -> bool:
        return bool(
            user.is_delivery_agent
            and order.delivery_agent_id is not None
            and order.delivery_agent.user_id == user.id
        )

    @staticmethod
    def get_order_for(user, order_id) -> Order:
        """Order visible to its owner, admins and its assigned delivery agent"""
        order = OrderService.get_order(order_id)
        if order.user_id == user.id or user.is_admin_role or OrderService.is_assigned_agent(user, order):
            return order
        raise Unauthorized("You are not allowed to view this order")

    @staticmethod
    def list_user_orders(user):
        return (
            Order.objects
            .filter(user=user)
            .select_related('delivery_agent', 'return_request')
            .prefetch_related('items')
        )

    @staticmethod
    def list_all_orders(filters: Optional[Dict] = None):
        """All orders for the admin dashboard, optionally filtered"""
        filters = filters or {}
        queryset = (
            Order.objects
            .select_related('user', 'delivery_agent', 'return_request')
            .prefetch_related('items')
        )
        for flag in ('is_paid', 'is_delivered'):
            if filters.get(flag) is not None:
                queryset = queryset.filter(**{flag: filters[flag]})
        if filters.get('payment_method'):
            queryset = queryset.filter(payment_method=filters['payment_method'])
        return queryset

    @staticmethod
    def list_agent_orders(user, is_delivered=None):
        """Orders assigned to the delivery agent behind user"""
        agent = getattr(user, 'delivery_profile', None)
        if agent is None:
            raise Unauthorized("No delivery agent profile for this account")

        queryset = (
            Order.objects
            .filter(delivery_agent=agent)
            .select_related('user', 'return_request')
            .prefetch_related('items')
        )
        if is_delivered is not None:
            queryset = queryset.filter(is_delivered=is_delivered)
        return queryset
