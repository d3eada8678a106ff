"""
Loyalty services module.
"""
from .config import LoyaltyConfig
from .ledger import LoyaltyLedger

__all__ = [
    'LoyaltyConfig',
    'LoyaltyLedger',
]
