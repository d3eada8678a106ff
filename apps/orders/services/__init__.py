"""
Order services module.
"""
from .order_service import OrderService
from .fulfillment_service import FulfillmentService
from .return_service import ReturnService

__all__ = [
    'OrderService',
    'FulfillmentService',
    'ReturnService',
]
