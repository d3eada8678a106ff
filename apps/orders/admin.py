from django.contrib import admin
from django.utils.html import format_html
from django.urls import reverse
from .models import Order, OrderItem, ReturnExchangeRequest


class OrderItemInline(admin.TabularInline):
    """Items are a checkout snapshot and cannot be edited"""
    model = OrderItem
    extra = 0
    can_delete = False
    fields = ['product_id', 'name', 'quantity', 'price', 'amount']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


class ReturnExchangeRequestInline(admin.StackedInline):
    model = ReturnExchangeRequest
    extra = 0
    can_delete = False
    fields = ['request_type', 'status', 'reason', 'requested_at', 'admin_comment']
    # Status changes go through the API so the transition rules apply
    readonly_fields = ['request_type', 'status', 'reason', 'requested_at']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'order_ref', 'user_link', 'payment_method', 'total_price', 'amount_paid',
        'is_paid', 'is_delivered', 'delivery_agent', 'is_refunded', 'created_at'
    ]
    list_filter = ['payment_method', 'is_paid', 'is_delivered', 'is_refunded', 'created_at']
    search_fields = ['order_ref', 'user__username', 'user__email', 'shipping_address__pincode']
    ordering = ['-created_at']
    readonly_fields = [
        'order_ref', 'user', 'shipping_address', 'payment_method',
        'items_price', 'shipping_price', 'tax_price', 'total_price',
        'points_discount', 'amount_paid', 'is_paid', 'paid_at', 'payment_result',
        'cod_payment_received', 'cod_payment_received_at', 'is_delivered',
        'delivered_at', 'delivery_agent', 'reward_points_used',
        'reward_discount_amount', 'is_refunded', 'refunded_at', 'created_at', 'updated_at'
    ]
    inlines = [OrderItemInline, ReturnExchangeRequestInline]

    def user_link(self, obj):
        url = reverse('admin:users_user_change', args=[obj.user_id])
        return format_html('<a href="{}">{}</a>', url, obj.user)
    user_link.short_description = 'User'
