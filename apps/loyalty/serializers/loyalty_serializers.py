from rest_framework import serializers
from apps.common.validators import validate_points_amount
from ..models import PointsEntry


class PointsEntrySerializer(serializers.ModelSerializer):
    order_ref = serializers.CharField(source='order.order_ref', read_only=True, default=None)

    class Meta:
        model = PointsEntry
        fields = ['id', 'points', 'category', 'description', 'order_ref', 'balance_after', 'created_at']
        read_only_fields = fields


class DashboardSerializer(serializers.Serializer):
    """Shape of LoyaltyLedger.dashboard()"""
    points = serializers.IntegerField()
    tier = serializers.CharField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    referral_code = serializers.CharField()
    tier_benefits = serializers.DictField()
    next_tier = serializers.CharField(allow_null=True)
    amount_to_next_tier = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)
    history = PointsEntrySerializer(many=True)


class RedeemSerializer(serializers.Serializer):
    points = serializers.IntegerField(validators=[validate_points_amount])


class ReferralSerializer(serializers.Serializer):
    referral_code = serializers.CharField(max_length=16)


class BirthdayBonusSerializer(serializers.Serializer):
    """Used for: POST /api/loyalty/birthday-bonus/ (admins)"""
    user_id = serializers.IntegerField(min_value=1)
