"""
Serializers for the delivery agent admin endpoints.
"""
from rest_framework import serializers
from apps.common.validators import validate_phone, validate_pincode
from ..models import DeliveryAgent


class DeliveryAgentSerializer(serializers.ModelSerializer):
    """Agent profile, optionally with live order counts passed in context"""
    email = serializers.EmailField(source='user.email', read_only=True)
    stats = serializers.SerializerMethodField()

    class Meta:
        model = DeliveryAgent
        fields = [
            'id', 'name', 'email', 'phone', 'service_area', 'service_pincodes',
            'is_active', 'stats', 'created_at'
        ]
        read_only_fields = fields

    def get_stats(self, obj):
        return self.context.get('stats', {}).get(obj.id)


class AgentRegistrationSerializer(serializers.Serializer):
    """Used for: POST /api/delivery-agents/register/"""
    name = serializers.CharField(max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[validate_phone])
    service_area = serializers.CharField(required=False, allow_blank=True, max_length=100)
    service_pincodes = serializers.ListField(
        child=serializers.CharField(validators=[validate_pincode]),
        required=False,
        default=list
    )


class AgentUpdateSerializer(serializers.Serializer):
    """Used for: PUT /api/delivery-agents/<id>/"""
    name = serializers.CharField(max_length=100, required=False)
    phone = serializers.CharField(required=False, allow_blank=True, validators=[validate_phone])
    service_area = serializers.CharField(required=False, allow_blank=True, max_length=100)
    service_pincodes = serializers.ListField(
        child=serializers.CharField(validators=[validate_pincode]),
        required=False
    )


class AgentStatusSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()
