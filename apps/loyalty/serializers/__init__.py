"""
Loyalty serializers module.
"""
from .loyalty_serializers import (
    PointsEntrySerializer, DashboardSerializer,
    RedeemSerializer, ReferralSerializer, BirthdayBonusSerializer
)

__all__ = [
    'PointsEntrySerializer',
    'DashboardSerializer',
    'RedeemSerializer',
    'ReferralSerializer',
    'BirthdayBonusSerializer',
]
