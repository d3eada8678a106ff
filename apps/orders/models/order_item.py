from django.db import models


class OrderItem(models.Model):
    """Order line item, a snapshot of the product at checkout"""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    product_id = models.CharField(max_length=50, help_text="Product reference")
    name = models.CharField(max_length=200, blank=True, default='')
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(max_digits=10, decimal_places=2, help_text="Unit price")
    amount = models.DecimalField(max_digits=12, decimal_places=2, help_text="Line total (quantity * price)")

    class Meta:
        db_table = 'order_items'
        indexes = [
            models.Index(fields=['order']),
            models.Index(fields=['product_id']),
        ]

    def __str__(self):
        return f"{self.quantity} x {self.name or self.product_id}"

    def save(self, *args, **kwargs):
        if not self.amount:
            self.amount = self.quantity * self.price
        super().save(*args, **kwargs)
