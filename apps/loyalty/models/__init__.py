"""
Loyalty models module.
"""
from .account import LoyaltyAccount
from .entry import PointsEntry

__all__ = [
    'LoyaltyAccount',
    'PointsEntry',
]
