from django.db import models


class ReturnExchangeRequest(models.Model):
    """
    Return/exchange tracking record, created together with its order.

    request_type stays 'none' until the customer files a request; it changes
    at most once.
    """

    TYPE_NONE = 'none'
    TYPE_RETURN = 'return'
    TYPE_EXCHANGE = 'exchange'

    TYPE_CHOICES = [
        (TYPE_NONE, 'None'),
        (TYPE_RETURN, 'Return'),
        (TYPE_EXCHANGE, 'Exchange'),
    ]

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_PICKED_UP = 'pickedUp'
    STATUS_COMPLETED = 'completed'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_PICKED_UP, 'Picked up'),
        (STATUS_COMPLETED, 'Completed'),
    ]

    order = models.OneToOneField('Order', on_delete=models.CASCADE, related_name='return_request')
    request_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default=TYPE_NONE)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, null=True, blank=True)
    reason = models.TextField(blank=True, default='')
    requested_at = models.DateTimeField(null=True, blank=True)
    admin_comment = models.TextField(blank=True, default='')
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'return_exchange_requests'
        indexes = [
            models.Index(fields=['request_type', 'status']),
        ]

    def __str__(self):
        return f"{self.request_type}/{self.status or '-'} for order {self.order_id}"

    @property
    def state(self):
        """Position in the return/exchange sub-machine ('none' until requested)"""
        if self.request_type == self.TYPE_NONE:
            return self.TYPE_NONE
        return self.status
