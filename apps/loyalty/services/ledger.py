"""
Loyalty ledger: earning, redemption, tiers and referrals.

Every balance change appends a PointsEntry in the same transaction, so the
balance always equals the signed sum of the account's entries.
"""
import logging
from decimal import Decimal, ROUND_FLOOR
import string

from django.db import transaction
from django.db.models import Sum
from django.utils import timezone
from django.utils.crypto import get_random_string

from apps.common.exceptions import (
    InsufficientBalance, InvalidReferralCode, AlreadyReferred, ValidationError
)
from apps.common.notifications import notify, TIER_UPGRADE
from ..models import LoyaltyAccount, PointsEntry
from .config import LoyaltyConfig

logger = logging.getLogger(__name__)

REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_CHARS = string.ascii_uppercase + string.digits


class LoyaltyLedger:
    """Points operations for one loyalty configuration"""

    def __init__(self, config=None, notifier=None):
        self.config = config or LoyaltyConfig.from_settings()
        self.notifier = notifier

    # Accounts

    def get_account(self, user):
        account, _ = LoyaltyAccount.objects.get_or_create(user=user)
        return account

    def _locked_account(self, user):
        """Fetch the account row under select_for_update; call inside atomic()"""
        account = self.get_account(user)
        return LoyaltyAccount.objects.select_for_update().get(pk=account.pk)

    def ensure_referral_code(self, account):
        """Give the account a referral code the first time one is needed"""
        if account.referral_code:
            return account.referral_code

        code = get_random_string(REFERRAL_CODE_LENGTH, REFERRAL_CODE_CHARS)
        while LoyaltyAccount.objects.filter(referral_code=code).exists():
            code = get_random_string(REFERRAL_CODE_LENGTH, REFERRAL_CODE_CHARS)
        account.referral_code = code
        account.save(update_fields=['referral_code', 'updated_at'])
        return code

    # Tiers

    def tier_for(self, total_spent):
        """Highest tier whose threshold total_spent has reached"""
        total_spent = Decimal(str(total_spent))
        current = self.config.tiers[0]
        for tier, threshold in self.config.tier_thresholds:
            if total_spent >= threshold:
                current = tier
        return current

    def next_tier(self, tier):
        tiers = self.config.tiers
        rank = self.config.rank(tier)
        if 0 <= rank < len(tiers) - 1:
            return tiers[rank + 1]
        return None

    # Earning and redemption

    def points_for(self, amount_paid):
        amount = Decimal(str(amount_paid)) * self.config.earn_rate
        return int(amount.to_integral_value(rounding=ROUND_FLOOR))

    @transaction.atomic
    def award_points(self, user, amount_paid, order=None):
        """
        Credit points for an amount paid by cash or card.

        Adds amount_paid to lifetime spend, appends an 'earned' entry and, when
        the spend crosses a tier threshold, upgrades the tier and appends a
        'bonus' entry.

        Returns:
            dict with points_earned, tier, upgraded and bonus_points
        """
        amount_paid = Decimal(str(amount_paid))
        if amount_paid < 0:
            raise ValidationError('Amount paid cannot be negative')

        account = self._locked_account(user)
        points = self.points_for(amount_paid)
        reference = f" for order {order.order_ref}" if order is not None else ''

        account.total_spent += amount_paid
        account.save(update_fields=['total_spent', 'updated_at'])
        if points > 0:
            account.credit(points, PointsEntry.CATEGORY_EARNED, f"Earned{reference}", order=order)

        previous_tier = account.tier
        new_tier = self.tier_for(account.total_spent)
        bonus = 0
        upgraded = self.config.rank(new_tier) > self.config.rank(previous_tier)
        if upgraded:
            account.tier = new_tier
            account.save(update_fields=['tier', 'updated_at'])
            bonus = self.config.tier_upgrade_bonus.get(new_tier, 0)
            if bonus > 0:
                account.credit(bonus, PointsEntry.CATEGORY_BONUS, f"Upgraded to {new_tier.title()}", order=order)
            logger.info(f"User {user.id} upgraded from {previous_tier} to {new_tier}")
            transaction.on_commit(lambda: notify(
                user, TIER_UPGRADE,
                f"Congratulations! You are now a {new_tier.title()} member.",
                notifier=self.notifier, tier=new_tier, bonus_points=bonus,
            ))

        logger.info(f"Awarded {points} points to user {user.id}{reference}")
        return {
            'points_earned': points,
            'tier': account.tier,
            'upgraded': upgraded,
            'bonus_points': bonus,
        }

    def _check_redeemable(self, account, points):
        if points < self.config.min_redemption:
            raise InsufficientBalance(f"Minimum redemption is {self.config.min_redemption} points")
        if points > account.points:
            raise InsufficientBalance(
                f"Insufficient points: {account.points} available, {points} requested"
            )

    def discount_for(self, points):
        return (Decimal(points) * self.config.conversion_rate).quantize(Decimal('0.01'))

    @transaction.atomic
    def redeem_points(self, user, points, order=None):
        """
        Spend points and return the currency discount they are worth.

        Raises:
            InsufficientBalance: Below the minimum or above the balance.
                Nothing is written in that case.
        """
        points = int(points)
        account = self._locked_account(user)
        self._check_redeemable(account, points)

        discount = self.discount_for(points)
        reference = f" on order {order.order_ref}" if order is not None else ''
        account.debit(points, PointsEntry.CATEGORY_REDEEMED, f"Redeemed for {discount} discount{reference}", order=order)
        logger.info(f"User {user.id} redeemed {points} points for {discount}")
        return discount

    def preview_discount(self, user, points):
        """Discount a redemption would give, without spending anything"""
        points = int(points)
        account = self.get_account(user)
        self._check_redeemable(account, points)
        return {
            'points': points,
            'discount_amount': self.discount_for(points),
            'available_points': account.points,
            'remaining_points': account.points - points,
        }

    # Bonuses

    @transaction.atomic
    def apply_referral(self, code, new_user):
        """
        Credit the referral bonus to both the code owner and new_user.

        Raises:
            InvalidReferralCode: Unknown code, or new_user's own code
            AlreadyReferred: new_user has already used a referral code
        """
        code = (code or '').strip().upper()
        referrer_pk = None
        if code:
            referrer_pk = (
                LoyaltyAccount.objects.filter(referral_code=code).values_list('pk', flat=True).first()
            )
        if referrer_pk is None:
            raise InvalidReferralCode()

        referee_pk = self.get_account(new_user).pk
        if referrer_pk == referee_pk:
            raise InvalidReferralCode('You cannot use your own referral code')

        # Both rows are locked in primary key order
        locked = {
            account.pk: account
            for account in LoyaltyAccount.objects.select_for_update()
            .filter(pk__in=[referrer_pk, referee_pk]).order_by('pk')
        }
        referrer, referee = locked[referrer_pk], locked[referee_pk]
        if referee.referred_by_id is not None:
            raise AlreadyReferred()

        bonus = self.config.referral_bonus
        referee.referred_by = referrer
        referee.save(update_fields=['referred_by', 'updated_at'])
        referee.credit(bonus, PointsEntry.CATEGORY_REFERRAL, f"Joined with referral code {code}")
        referrer.credit(bonus, PointsEntry.CATEGORY_REFERRAL, f"Referred {new_user.username}")
        logger.info(f"User {new_user.id} applied referral code of account {referrer.pk}")
        return {'bonus_points': bonus, 'points': referee.points}

    @transaction.atomic
    def award_birthday_bonus(self, user, today=None):
        """Credit the birthday bonus, at most once per calendar year"""
        year = (today or timezone.localdate()).year
        account = self._locked_account(user)
        if account.birthday_bonus_year == year:
            raise ValidationError('Birthday bonus already credited this year')

        account.birthday_bonus_year = year
        account.save(update_fields=['birthday_bonus_year', 'updated_at'])
        return account.credit(self.config.birthday_bonus, PointsEntry.CATEGORY_BONUS, 'Birthday bonus')

    # Reporting

    def history(self, user, limit=None):
        entries = self.get_account(user).entries.select_related('order')
        return list(entries[:limit]) if limit else list(entries)

    def dashboard(self, user):
        account = self.get_account(user)
        self.ensure_referral_code(account)
        next_tier = self.next_tier(account.tier)
        to_next = None
        if next_tier is not None:
            to_next = max(self.config.threshold(next_tier) - account.total_spent, Decimal('0.00'))
        return {
            'points': account.points,
            'tier': account.tier,
            'total_spent': account.total_spent,
            'referral_code': account.referral_code,
            'tier_benefits': self.config.tier_benefits.get(account.tier, {}),
            'next_tier': next_tier,
            'amount_to_next_tier': to_next,
            'history': self.history(user, limit=self.config.history_tail),
        }

    def tier_info(self):
        return {
            'tiers': [
                {
                    'tier': tier,
                    'threshold': threshold,
                    'upgrade_bonus': self.config.tier_upgrade_bonus.get(tier, 0),
                    'benefits': self.config.tier_benefits.get(tier, {}),
                }
                for tier, threshold in self.config.tier_thresholds
            ],
            'earn_rate': self.config.earn_rate,
            'conversion_rate': self.config.conversion_rate,
            'min_redemption': self.config.min_redemption,
            'referral_bonus': self.config.referral_bonus,
        }

    @staticmethod
    def balance_is_consistent(account):
        """True when the stored balance equals the sum of the ledger entries"""
        total = account.entries.aggregate(total=Sum('points'))['total'] or 0
        account.refresh_from_db(fields=['points'])
        return total == account.points
