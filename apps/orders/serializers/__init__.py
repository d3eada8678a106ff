"""
Order serializers module.
"""
from .order_serializers import (
    OrderItemSerializer, ReturnExchangeRequestSerializer,
    OrderSerializer, OrderCreateSerializer
)
from .order_action_serializers import (
    PaymentCallbackSerializer, ReturnRequestSerializer, ReturnStatusSerializer
)

__all__ = [
    'OrderItemSerializer',
    'ReturnExchangeRequestSerializer',
    'OrderSerializer',
    'OrderCreateSerializer',
    'PaymentCallbackSerializer',
    'ReturnRequestSerializer',
    'ReturnStatusSerializer',
]
