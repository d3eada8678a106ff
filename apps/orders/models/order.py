from decimal import Decimal

from django.db import models
from django.conf import settings


class Order(models.Model):
    """
    Customer order.

    Payment, delivery and return progress are independent sub-states kept as
    flags (see apps.orders.state_machine). Items, the delivery agent and the
    redeemed points are fixed when the order is created.
    """

    PAYMENT_COD = 'cod'
    PAYMENT_PREPAID = 'prepaid'

    PAYMENT_METHOD_CHOICES = [
        (PAYMENT_COD, 'Cash on delivery'),
        (PAYMENT_PREPAID, 'Prepaid'),
    ]

    order_ref = models.CharField(max_length=32, unique=True, help_text="Public order reference")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='orders'
    )
    shipping_address = models.JSONField(default=dict, help_text="address, city, pincode, country")
    payment_method = models.CharField(max_length=10, choices=PAYMENT_METHOD_CHOICES)

    # Totals
    items_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    shipping_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    tax_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    points_discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    amount_paid = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        help_text="Amount due by the payment method after the points discount"
    )

    # Payment
    is_paid = models.BooleanField(default=False)
    paid_at = models.DateTimeField(null=True, blank=True)
    payment_result = models.JSONField(default=dict, blank=True, help_text="Verified payment callback")
    cod_payment_received = models.BooleanField(default=False)
    cod_payment_received_at = models.DateTimeField(null=True, blank=True)

    # Delivery
    is_delivered = models.BooleanField(default=False)
    delivered_at = models.DateTimeField(null=True, blank=True)
    delivery_agent = models.ForeignKey(
        'delivery.DeliveryAgent',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='orders'
    )

    # Redeemed loyalty points
    reward_points_used = models.PositiveIntegerField(default=0)
    reward_discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    # Refund
    is_refunded = models.BooleanField(default=False)
    refunded_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['delivery_agent', 'is_delivered']),
            models.Index(fields=['user', 'created_at']),
            models.Index(fields=['is_paid']),
            models.Index(fields=['created_at']),
        ]

    def __str__(self):
        return f"Order {self.order_ref}"

    @property
    def is_cod(self):
        return self.payment_method == self.PAYMENT_COD

    @property
    def shipping_city(self):
        return (self.shipping_address or {}).get('city', '')

    @property
    def shipping_pincode(self):
        return str((self.shipping_address or {}).get('pincode', ''))
