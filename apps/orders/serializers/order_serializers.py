"""
Order serializers for detail and create operations.
"""
from decimal import Decimal

from rest_framework import serializers
from apps.common.validators import validate_pincode, validate_price_range, validate_quantity
from ..models import Order, OrderItem, ReturnExchangeRequest


class OrderItemSerializer(serializers.ModelSerializer):

    class Meta:
        model = OrderItem
        fields = ['product_id', 'name', 'quantity', 'price', 'amount']


class ReturnExchangeRequestSerializer(serializers.ModelSerializer):

    class Meta:
        model = ReturnExchangeRequest
        fields = ['request_type', 'status', 'reason', 'requested_at', 'admin_comment', 'updated_at']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Full order representation returned by every order endpoint"""

    items = OrderItemSerializer(many=True, read_only=True)
    return_exchange_request = ReturnExchangeRequestSerializer(source='return_request', read_only=True)
    delivery_agent = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_ref', 'user', 'items', 'shipping_address', 'payment_method',
            'items_price', 'shipping_price', 'tax_price', 'total_price',
            'points_discount', 'amount_paid',
            'is_paid', 'paid_at', 'payment_result',
            'cod_payment_received', 'cod_payment_received_at',
            'is_delivered', 'delivered_at', 'delivery_agent',
            'reward_points_used', 'reward_discount_amount',
            'return_exchange_request', 'is_refunded', 'refunded_at',
            'created_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_delivery_agent(self, obj):
        agent = obj.delivery_agent
        if agent is None:
            return None
        return {'id': agent.id, 'name': agent.name, 'phone': agent.phone}


class OrderItemInputSerializer(serializers.Serializer):
    product_id = serializers.CharField(max_length=50)
    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    quantity = serializers.IntegerField(validators=[validate_quantity])
    price = serializers.DecimalField(max_digits=10, decimal_places=2, validators=[validate_price_range])


class ShippingAddressSerializer(serializers.Serializer):
    address = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
    city = serializers.CharField(max_length=100)
    pincode = serializers.CharField(validators=[validate_pincode])
    country = serializers.CharField(max_length=60, required=False, default='India')


class OrderCreateSerializer(serializers.Serializer):
    """Used for: POST /api/orders/"""
    items = OrderItemInputSerializer(many=True)
    shipping_address = ShippingAddressSerializer()
    payment_method = serializers.ChoiceField(choices=Order.PAYMENT_METHOD_CHOICES)
    reward_points_to_redeem = serializers.IntegerField(min_value=0, required=False, default=0)
    shipping_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False, default=Decimal('0')
    )
    tax_price = serializers.DecimalField(
        max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False, default=Decimal('0')
    )
