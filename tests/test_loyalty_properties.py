"""
Property-based tests for the loyalty ledger.
"""
import datetime
from decimal import Decimal
from unittest.mock import patch

import pytest
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase
from django.db import connection
from django.test.utils import CaptureQueriesContext

from apps.common.exceptions import (
    InsufficientBalance, InvalidReferralCode, AlreadyReferred, ValidationError
)
from apps.loyalty.models import LoyaltyAccount, PointsEntry
from apps.loyalty.services import LoyaltyLedger
from tests.factories import UserFactory, loyalty_config, give_points
from tests.notifiers import RecordingNotifier

operations = st.lists(
    st.one_of(
        st.tuples(st.just('award'), st.decimals(min_value=0, max_value=60000, places=2)),
        st.tuples(st.just('redeem'), st.integers(min_value=1, max_value=3000)),
    ),
    min_size=1,
    max_size=8,
)


@pytest.mark.django_db
class TestPointsLedgerProperties(TestCase):

    def setUp(self):
        self.ledger = LoyaltyLedger(loyalty_config(), notifier=RecordingNotifier())

    @given(ops=operations)
    @settings(max_examples=40, deadline=None)
    def test_balance_equals_sum_of_entries(self, ops):
        user = UserFactory()
        for op, value in ops:
            if op == 'award':
                self.ledger.award_points(user, value)
            else:
                try:
                    self.ledger.redeem_points(user, value)
                except InsufficientBalance:
                    pass

        account = LoyaltyAccount.objects.get(user=user)
        self.assertTrue(LoyaltyLedger.balance_is_consistent(account))
        self.assertGreaterEqual(account.points, 0)
        last = account.entries.first()
        if last is not None:
            self.assertEqual(last.balance_after, account.points)

    @given(balance=st.integers(min_value=0, max_value=2000), points=st.integers(min_value=1, max_value=4000))
    @settings(max_examples=50, deadline=None)
    def test_redemption_floor_and_ceiling(self, balance, points):
        user = UserFactory()
        if balance:
            give_points(user, balance)
        entries_before = PointsEntry.objects.filter(account__user=user).count()

        if points < 100 or points > balance:
            with self.assertRaises(InsufficientBalance):
                self.ledger.redeem_points(user, points)
            self.assertEqual(LoyaltyAccount.objects.get(user=user).points, balance)
            self.assertEqual(PointsEntry.objects.filter(account__user=user).count(), entries_before)
        else:
            discount = self.ledger.redeem_points(user, points)
            self.assertEqual(discount, Decimal(points).quantize(Decimal('0.01')))
            self.assertEqual(LoyaltyAccount.objects.get(user=user).points, balance - points)

    @given(amount=st.decimals(min_value=0, max_value=9999, places=2))
    @settings(max_examples=30, deadline=None)
    def test_earned_points_are_one_percent_rounded_down(self, amount):
        user = UserFactory()

        result = self.ledger.award_points(user, amount)

        self.assertEqual(result['points_earned'], int(amount // 100))
        self.assertFalse(result['upgraded'])

    @given(spent=st.decimals(min_value=0, max_value=100000, places=2))
    @settings(max_examples=30, deadline=None)
    def test_tier_thresholds(self, spent):
        tier = self.ledger.tier_for(spent)
        if spent >= 50000:
            self.assertEqual(tier, 'platinum')
        elif spent >= 10000:
            self.assertEqual(tier, 'gold')
        else:
            self.assertEqual(tier, 'silver')


@pytest.mark.django_db
class TestLedgerOperations:

    def setup_method(self):
        self.notifier = RecordingNotifier()
        self.ledger = LoyaltyLedger(loyalty_config(), notifier=self.notifier)

    def test_redeem_more_than_balance(self, customer):
        give_points(customer, 50)

        with pytest.raises(InsufficientBalance):
            self.ledger.redeem_points(customer, 100)

        assert LoyaltyAccount.objects.get(user=customer).points == 50

    def test_conversion_rate_is_configurable(self, customer):
        ledger = LoyaltyLedger(loyalty_config(conversion_rate=Decimal('0.25')))
        give_points(customer, 400)

        assert ledger.redeem_points(customer, 400) == Decimal('100.00')

    def test_gold_upgrade_adds_bonus(self, customer, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            result = self.ledger.award_points(customer, Decimal('10000'))

        account = LoyaltyAccount.objects.get(user=customer)
        assert result == {'points_earned': 100, 'tier': 'gold', 'upgraded': True, 'bonus_points': 500}
        assert account.points == 600
        assert account.entries.filter(category='bonus', points=500).exists()
        assert self.notifier.events() == ['tier_upgrade']

    def test_skipping_to_platinum_pays_platinum_bonus_only(self, customer):
        result = self.ledger.award_points(customer, Decimal('50000'))

        account = LoyaltyAccount.objects.get(user=customer)
        assert result['tier'] == 'platinum'
        assert result['bonus_points'] == 1000
        assert account.points == 500 + 1000

    def test_no_bonus_without_tier_change(self, customer):
        self.ledger.award_points(customer, Decimal('10000'))
        result = self.ledger.award_points(customer, Decimal('100'))

        assert not result['upgraded']
        assert result['bonus_points'] == 0

    def test_referral_credits_both_accounts(self):
        referrer, newcomer = UserFactory(), UserFactory()
        code = self.ledger.ensure_referral_code(self.ledger.get_account(referrer))

        self.ledger.apply_referral(code.lower(), newcomer)

        referrer_account = LoyaltyAccount.objects.get(user=referrer)
        newcomer_account = LoyaltyAccount.objects.get(user=newcomer)
        assert referrer_account.points == 500
        assert newcomer_account.points == 500
        assert newcomer_account.referred_by == referrer_account
        assert LoyaltyLedger.balance_is_consistent(referrer_account)

    def test_referral_only_once(self):
        referrer, newcomer = UserFactory(), UserFactory()
        code = self.ledger.ensure_referral_code(self.ledger.get_account(referrer))
        self.ledger.apply_referral(code, newcomer)

        with pytest.raises(AlreadyReferred):
            self.ledger.apply_referral(code, newcomer)
        assert LoyaltyAccount.objects.get(user=referrer).points == 500

    def test_referral_is_all_or_nothing(self):
        referrer, newcomer = UserFactory(), UserFactory()
        code = self.ledger.ensure_referral_code(self.ledger.get_account(referrer))
        credit = LoyaltyAccount.credit
        calls = []

        def fail_second_credit(account, *args, **kwargs):
            calls.append(account.pk)
            if len(calls) == 2:
                raise RuntimeError("ledger write failed")
            return credit(account, *args, **kwargs)

        with patch.object(LoyaltyAccount, 'credit', autospec=True, side_effect=fail_second_credit):
            with pytest.raises(RuntimeError):
                self.ledger.apply_referral(code, newcomer)

        assert len(calls) == 2
        for user in (referrer, newcomer):
            account = LoyaltyAccount.objects.get(user=user)
            assert account.points == 0
            assert account.referred_by is None
        assert PointsEntry.objects.count() == 0

    def test_crossed_referrals_lock_accounts_in_id_order(self):
        first, second = UserFactory(), UserFactory()
        first_account, second_account = self.ledger.get_account(first), self.ledger.get_account(second)
        first_code = self.ledger.ensure_referral_code(first_account)
        second_code = self.ledger.ensure_referral_code(second_account)
        ordered_lock = f'ORDER BY "{LoyaltyAccount._meta.db_table}"."id" ASC'

        for code, user in ((second_code, first), (first_code, second)):
            with CaptureQueriesContext(connection) as queries:
                self.ledger.apply_referral(code, user)
            assert any(ordered_lock in query['sql'] for query in queries.captured_queries)

        assert LoyaltyAccount.objects.get(user=first).referred_by == second_account
        assert LoyaltyAccount.objects.get(user=second).referred_by == first_account
        assert LoyaltyAccount.objects.get(user=first).points == 1000

    def test_unknown_and_own_codes(self, customer):
        code = self.ledger.ensure_referral_code(self.ledger.get_account(customer))

        with pytest.raises(InvalidReferralCode):
            self.ledger.apply_referral('NOPE1234', customer)
        with pytest.raises(InvalidReferralCode):
            self.ledger.apply_referral(code, customer)
        assert LoyaltyAccount.objects.get(user=customer).points == 0

    def test_referral_code_is_stable(self, customer):
        account = self.ledger.get_account(customer)
        first = self.ledger.ensure_referral_code(account)

        assert self.ledger.ensure_referral_code(account) == first
        assert len(first) == 8

    def test_dashboard(self, customer):
        for _ in range(12):
            self.ledger.award_points(customer, Decimal('200'))

        dashboard = self.ledger.dashboard(customer)

        assert dashboard['points'] == 24
        assert dashboard['tier'] == 'silver'
        assert dashboard['next_tier'] == 'gold'
        assert dashboard['amount_to_next_tier'] == Decimal('7600.00')
        assert dashboard['referral_code']
        assert len(dashboard['history']) == 10
        assert dashboard['history'][0].balance_after == 24

    def test_dashboard_at_top_tier(self, customer):
        self.ledger.award_points(customer, Decimal('60000'))

        dashboard = self.ledger.dashboard(customer)

        assert dashboard['next_tier'] is None
        assert dashboard['amount_to_next_tier'] is None
        assert dashboard['tier_benefits']['priority_support'] is True

    def test_preview_does_not_spend(self, customer):
        give_points(customer, 300)

        preview = self.ledger.preview_discount(customer, 200)

        assert preview['discount_amount'] == Decimal('200.00')
        assert preview['remaining_points'] == 100
        assert LoyaltyAccount.objects.get(user=customer).points == 300

    def test_birthday_bonus_once_a_year(self, customer):
        today = datetime.date(2026, 3, 14)
        self.ledger.award_birthday_bonus(customer, today=today)

        with pytest.raises(ValidationError):
            self.ledger.award_birthday_bonus(customer, today=today)
        self.ledger.award_birthday_bonus(customer, today=datetime.date(2027, 3, 14))

        assert LoyaltyAccount.objects.get(user=customer).points == 400

    def test_entries_are_append_only(self, customer):
        entry = give_points(customer, 100).entries.get()

        entry.points = 1000
        with pytest.raises(ValueError):
            entry.save()
        with pytest.raises(ValueError):
            entry.delete()

    def test_tier_info(self):
        info = self.ledger.tier_info()

        assert [tier['tier'] for tier in info['tiers']] == ['silver', 'gold', 'platinum']
        assert info['tiers'][2]['upgrade_bonus'] == 1000
        assert info['min_redemption'] == 100
