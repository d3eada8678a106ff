"""
Loyalty endpoints for the signed-in customer, plus the admin birthday bonus.
"""
from django.contrib.auth import get_user_model
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated

from apps.common.exceptions import NotFound
from apps.common.permissions import IsAdminRole
from apps.common.utils import success_response, error_response
from ..serializers import (
    PointsEntrySerializer, DashboardSerializer,
    RedeemSerializer, ReferralSerializer, BirthdayBonusSerializer
)
from ..services import LoyaltyLedger


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_dashboard(request):
    """Points, tier, referral code and recent history"""
    dashboard = LoyaltyLedger().dashboard(request.user)
    return success_response(DashboardSerializer(dashboard).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_history(request):
    entries = LoyaltyLedger().history(request.user)
    return success_response(PointsEntrySerializer(entries, many=True).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def get_tier_info(request):
    """Tier thresholds, benefits and point rates"""
    info = LoyaltyLedger().tier_info()
    info['earn_rate'] = str(info['earn_rate'])
    info['conversion_rate'] = str(info['conversion_rate'])
    for tier in info['tiers']:
        tier['threshold'] = str(tier['threshold'])
    return success_response(info)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_points(request):
    """Spend points outside of checkout"""
    serializer = RedeemSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid redemption request', serializer.errors)

    ledger = LoyaltyLedger()
    discount = ledger.redeem_points(request.user, serializer.validated_data['points'])
    return success_response({
        'points_redeemed': serializer.validated_data['points'],
        'discount_amount': str(discount),
        'points': ledger.get_account(request.user).points,
    }, 'Points redeemed')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def calculate_discount(request):
    """Check a redemption at checkout without spending the points"""
    serializer = RedeemSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid redemption request', serializer.errors)

    preview = LoyaltyLedger().preview_discount(request.user, serializer.validated_data['points'])
    preview['discount_amount'] = str(preview['discount_amount'])
    return success_response(preview)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def apply_referral(request):
    serializer = ReferralSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Referral code is required', serializer.errors)

    result = LoyaltyLedger().apply_referral(serializer.validated_data['referral_code'], request.user)
    return success_response(result, 'Referral applied')


@api_view(['POST'])
@permission_classes([IsAdminRole])
def award_birthday_bonus(request):
    """Credit a customer's birthday bonus, once per calendar year"""
    serializer = BirthdayBonusSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('user_id is required', serializer.errors)

    User = get_user_model()
    try:
        user = User.objects.get(id=serializer.validated_data['user_id'])
    except User.DoesNotExist:
        raise NotFound('User not found')

    ledger = LoyaltyLedger()
    entry = ledger.award_birthday_bonus(user)
    return success_response({
        'bonus_points': entry.points,
        'points': entry.balance_after,
    }, 'Birthday bonus credited')
