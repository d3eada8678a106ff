"""
Loyalty views module.
"""
from .loyalty_views import (
    get_dashboard, get_history, get_tier_info,
    redeem_points, calculate_discount, apply_referral,
    award_birthday_bonus
)

__all__ = [
    'get_dashboard',
    'get_history',
    'get_tier_info',
    'redeem_points',
    'calculate_discount',
    'apply_referral',
    'award_birthday_bonus',
]
