"""
Order action serializers for payment and return/exchange operations.
"""
from rest_framework import serializers
from ..models import ReturnExchangeRequest


class PaymentCallbackSerializer(serializers.Serializer):
    """Gateway callback forwarded by the checkout page"""
    payment_id = serializers.CharField(max_length=100)
    signature = serializers.CharField(max_length=256)
    status = serializers.CharField(max_length=30, required=False, default='success')
    email_address = serializers.EmailField(required=False, allow_blank=True, default='')


class ReturnRequestSerializer(serializers.Serializer):
    request_type = serializers.ChoiceField(choices=[
        ReturnExchangeRequest.TYPE_RETURN,
        ReturnExchangeRequest.TYPE_EXCHANGE,
    ])
    reason = serializers.CharField(max_length=1000)

    def validate_reason(self, value):
        if not value.strip():
            raise serializers.ValidationError("Reason cannot be empty")
        return value.strip()


class ReturnStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[
        ReturnExchangeRequest.STATUS_APPROVED,
        ReturnExchangeRequest.STATUS_REJECTED,
        ReturnExchangeRequest.STATUS_PICKED_UP,
        ReturnExchangeRequest.STATUS_COMPLETED,
    ])
    admin_comment = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
