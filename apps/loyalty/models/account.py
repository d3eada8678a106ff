from decimal import Decimal

from django.db import models
from django.conf import settings


class LoyaltyAccount(models.Model):
    """Points balance, lifetime spend and tier of one customer"""

    TIER_SILVER = 'silver'
    TIER_GOLD = 'gold'
    TIER_PLATINUM = 'platinum'

    TIER_CHOICES = [
        (TIER_SILVER, 'Silver'),
        (TIER_GOLD, 'Gold'),
        (TIER_PLATINUM, 'Platinum'),
    ]

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='loyalty_account'
    )
    points = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    tier = models.CharField(max_length=10, choices=TIER_CHOICES, default=TIER_SILVER)
    referral_code = models.CharField(max_length=16, unique=True, null=True, blank=True)
    referred_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='referrals'
    )
    birthday_bonus_year = models.PositiveIntegerField(
        null=True, blank=True, help_text="Last year a birthday bonus was credited"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'loyalty_accounts'
        verbose_name = 'Loyalty Account'
        verbose_name_plural = 'Loyalty Accounts'

    def __str__(self):
        return f"{self.user.username} - {self.points} points ({self.tier})"

    def credit(self, points, category, description='', order=None):
        """Add points and append the matching ledger entry"""
        if points <= 0:
            raise ValueError("Points amount must be positive")

        self.points += points
        self.save(update_fields=['points', 'updated_at'])
        return self._append_entry(points, category, description, order)

    def debit(self, points, category, description='', order=None):
        """Remove points and append the matching ledger entry"""
        if points <= 0:
            raise ValueError("Points amount must be positive")
        if points > self.points:
            raise ValueError("Insufficient points")

        self.points -= points
        self.save(update_fields=['points', 'updated_at'])
        return self._append_entry(-points, category, description, order)

    def _append_entry(self, delta, category, description, order):
        from .entry import PointsEntry
        return PointsEntry.objects.create(
            account=self,
            points=delta,
            category=category,
            description=description,
            order=order,
            balance_after=self.points,
        )
