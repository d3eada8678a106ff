"""
Order models module.
"""
from .order import Order
from .order_item import OrderItem
from .return_request import ReturnExchangeRequest

__all__ = [
    'Order',
    'OrderItem',
    'ReturnExchangeRequest',
]
