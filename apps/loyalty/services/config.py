"""
Loyalty program parameters.
"""
from decimal import Decimal

from django.conf import settings


class LoyaltyConfig:
    """
    Rates, thresholds and bonuses used by LoyaltyLedger.

    Built from settings.LOYALTY by from_settings(); tests construct their own
    instances instead of patching settings.
    """

    def __init__(self, earn_rate, conversion_rate, min_redemption, tier_thresholds,
                 tier_upgrade_bonus=None, tier_benefits=None, referral_bonus=500,
                 birthday_bonus=200, history_tail=10):
        self.earn_rate = Decimal(str(earn_rate))
        self.conversion_rate = Decimal(str(conversion_rate))
        self.min_redemption = int(min_redemption)
        # (tier, threshold) pairs, lowest threshold first
        self.tier_thresholds = sorted(
            ((tier, Decimal(str(threshold))) for tier, threshold in dict(tier_thresholds).items()),
            key=lambda pair: pair[1]
        )
        self.tier_upgrade_bonus = {tier: int(bonus) for tier, bonus in (tier_upgrade_bonus or {}).items()}
        self.tier_benefits = dict(tier_benefits or {})
        self.referral_bonus = int(referral_bonus)
        self.birthday_bonus = int(birthday_bonus)
        self.history_tail = int(history_tail)

    @classmethod
    def from_settings(cls):
        loyalty = settings.LOYALTY
        return cls(
            earn_rate=loyalty['EARN_RATE'],
            conversion_rate=loyalty['CONVERSION_RATE'],
            min_redemption=loyalty['MIN_REDEMPTION'],
            tier_thresholds=loyalty['TIER_THRESHOLDS'],
            tier_upgrade_bonus=loyalty.get('TIER_UPGRADE_BONUS'),
            tier_benefits=loyalty.get('TIER_BENEFITS'),
            referral_bonus=loyalty.get('REFERRAL_BONUS', 500),
            birthday_bonus=loyalty.get('BIRTHDAY_BONUS', 200),
            history_tail=loyalty.get('HISTORY_TAIL', 10),
        )

    @property
    def tiers(self):
        return [tier for tier, _ in self.tier_thresholds]

    def rank(self, tier):
        return self.tiers.index(tier) if tier in self.tiers else -1

    def threshold(self, tier):
        return dict(self.tier_thresholds)[tier]
