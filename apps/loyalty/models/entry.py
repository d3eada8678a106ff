from django.db import models


class PointsEntry(models.Model):
    """Append-only points ledger line. points is a signed delta"""

    CATEGORY_EARNED = 'earned'
    CATEGORY_REDEEMED = 'redeemed'
    CATEGORY_BONUS = 'bonus'
    CATEGORY_REFERRAL = 'referral'

    CATEGORY_CHOICES = [
        (CATEGORY_EARNED, 'Earned'),
        (CATEGORY_REDEEMED, 'Redeemed'),
        (CATEGORY_BONUS, 'Bonus'),
        (CATEGORY_REFERRAL, 'Referral'),
    ]

    account = models.ForeignKey('LoyaltyAccount', on_delete=models.CASCADE, related_name='entries')
    points = models.IntegerField()
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES)
    description = models.CharField(max_length=200, blank=True, default='')
    order = models.ForeignKey(
        'orders.Order',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='points_entries'
    )
    balance_after = models.IntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'loyalty_points_entries'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['account', 'created_at']),
        ]
        verbose_name = 'Points Entry'
        verbose_name_plural = 'Points Entries'

    def __str__(self):
        return f"{self.account_id}: {self.points:+d} ({self.category})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Points entries are append-only")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Points entries are append-only")
