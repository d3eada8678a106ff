"""
Delivery models module.
"""
from .agent import DeliveryAgent

__all__ = [
    'DeliveryAgent',
]
