"""
Order creation, fulfillment and return/exchange workflow.
"""
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase

from apps.common.exceptions import (
    InsufficientBalance, InvalidTransition, PaymentVerificationFailed,
    Unauthorized, ValidationError
)
from apps.loyalty.models import LoyaltyAccount, PointsEntry
from apps.loyalty.services import LoyaltyLedger
from apps.orders.models import Order, OrderItem, ReturnExchangeRequest
from apps.orders.services import OrderService, FulfillmentService, ReturnService
from apps.payments.verifier import PaymentVerifier
from tests.factories import (
    UserFactory, AdminFactory, DeliveryAgentFactory, OrderFactory,
    loyalty_config, give_points, order_items, address
)
from tests.notifiers import RecordingNotifier, FailingNotifier


def delivered_order(**kwargs):
    kwargs.setdefault('delivery_agent', DeliveryAgentFactory())
    return OrderFactory(is_delivered=True, cod_payment_received=True, is_paid=True, **kwargs)


@pytest.mark.django_db
class TestCreateOrder:

    def test_creates_order_items_and_return_record(self, customer, agent, recording_notifier):
        order = OrderService.create_order(
            customer, order_items((2500, 2), (1000, 1)), address(), 'cod',
            shipping_price=Decimal('50'), tax_price=Decimal('100'),
            notifier=recording_notifier,
        )

        assert order.items_price == Decimal('6000.00')
        assert order.total_price == Decimal('6150.00')
        assert order.amount_paid == Decimal('6150.00')
        assert order.delivery_agent == agent
        assert order.items.count() == 2
        assert order.return_request.request_type == ReturnExchangeRequest.TYPE_NONE
        assert not order.is_paid and not order.is_delivered
        assert recording_notifier.events() == ['order_confirmation']

    def test_empty_items_are_rejected_before_writing(self, customer):
        with pytest.raises(ValidationError):
            OrderService.create_order(customer, [], address(), 'cod')
        assert Order.objects.count() == 0

    @pytest.mark.parametrize('bad_address', [
        {'city': 'Bangalore'},
        {'pincode': '560001'},
        {'city': '  ', 'pincode': '560001'},
    ])
    def test_address_needs_city_and_pincode(self, customer, bad_address):
        with pytest.raises(ValidationError):
            OrderService.create_order(customer, order_items((100, 1)), bad_address, 'cod')

    @pytest.mark.parametrize('items', [
        [{'product_id': 'P1', 'quantity': 0, 'price': Decimal('10')}],
        [{'product_id': 'P1', 'quantity': 1, 'price': Decimal('0')}],
        [{'product_id': 'P1', 'quantity': 1}],
    ])
    def test_item_lines_are_validated(self, customer, items):
        with pytest.raises(ValidationError):
            OrderService.create_order(customer, items, address(), 'cod')

    def test_unknown_payment_method(self, customer):
        with pytest.raises(ValidationError):
            OrderService.create_order(customer, order_items((100, 1)), address(), 'barter')

    def test_order_without_agent_is_still_created(self, customer):
        order = OrderService.create_order(customer, order_items((100, 1)), address(), 'prepaid')

        assert order.pk is not None
        assert order.delivery_agent is None

    def test_failed_redemption_rolls_back_everything(self, customer, agent):
        ledger = LoyaltyLedger(loyalty_config())

        with pytest.raises(InsufficientBalance):
            OrderService.create_order(
                customer, order_items((1000, 1)), address(), 'cod',
                reward_points_to_redeem=200, ledger=ledger,
            )

        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0
        assert ReturnExchangeRequest.objects.count() == 0
        account = LoyaltyAccount.objects.get(user=customer)
        assert account.points == 0
        assert account.total_spent == Decimal('0.00')
        assert not account.entries.exists()

    def test_points_are_earned_on_amount_paid_only(self, customer):
        ledger = LoyaltyLedger(loyalty_config())
        give_points(customer, 500)

        order = OrderService.create_order(
            customer, order_items((5000, 2)), address(), 'prepaid',
            reward_points_to_redeem=500, ledger=ledger,
        )

        assert order.reward_points_used == 500
        assert order.reward_discount_amount == Decimal('500.00')
        assert order.amount_paid == Decimal('9500.00')
        account = LoyaltyAccount.objects.get(user=customer)
        assert account.points == 95
        assert account.total_spent == Decimal('9500.00')
        assert account.tier == 'silver'
        categories = list(account.entries.order_by('id').values_list('category', 'points'))
        assert categories == [('bonus', 500), ('redeemed', -500), ('earned', 95)]

    def test_discount_cannot_exceed_total(self, customer):
        give_points(customer, 5000)

        with pytest.raises(ValidationError):
            OrderService.create_order(
                customer, order_items((100, 1)), address(), 'prepaid',
                reward_points_to_redeem=1000, ledger=LoyaltyLedger(loyalty_config()),
            )
        assert LoyaltyAccount.objects.get(user=customer).points == 5000

    def test_notifier_failure_does_not_fail_checkout(self, customer, agent):
        order = OrderService.create_order(
            customer, order_items((100, 1)), address(), 'cod', notifier=FailingNotifier()
        )

        assert Order.objects.filter(pk=order.pk).exists()


@pytest.mark.django_db
class TestOrderAccess:

    def test_owner_admin_and_assigned_agent_can_view(self, customer, agent):
        order = OrderFactory(user=customer, delivery_agent=agent)

        assert OrderService.get_order_for(customer, order.id) == order
        assert OrderService.get_order_for(AdminFactory(), order.id) == order
        assert OrderService.get_order_for(agent.user, order.id) == order

    def test_strangers_cannot_view(self, customer, agent):
        order = OrderFactory(user=customer, delivery_agent=agent)

        with pytest.raises(Unauthorized):
            OrderService.get_order_for(UserFactory(), order.id)
        with pytest.raises(Unauthorized):
            OrderService.get_order_for(DeliveryAgentFactory().user, order.id)

    def test_agent_queue_lists_only_assigned_orders(self, agent):
        mine = OrderFactory(delivery_agent=agent)
        OrderFactory(delivery_agent=DeliveryAgentFactory())

        assert list(OrderService.list_agent_orders(agent.user)) == [mine]
        with pytest.raises(Unauthorized):
            OrderService.list_agent_orders(UserFactory())


@pytest.mark.django_db
class TestFulfillment:

    def test_cod_order_cannot_be_delivered_before_collection(self, agent):
        order = OrderFactory(delivery_agent=agent, payment_method='cod')

        with pytest.raises(InvalidTransition):
            FulfillmentService.mark_delivered(agent.user, order.id)

        order.refresh_from_db()
        assert not order.is_delivered
        assert order.delivered_at is None

    def test_collect_then_deliver(self, agent, recording_notifier):
        order = OrderFactory(delivery_agent=agent, payment_method='cod')

        FulfillmentService.record_cod_payment(agent.user, order.id, notifier=recording_notifier)
        FulfillmentService.mark_delivered(agent.user, order.id, notifier=recording_notifier)

        order.refresh_from_db()
        assert order.cod_payment_received and order.is_paid and order.is_delivered
        assert order.paid_at is not None and order.delivered_at is not None
        assert recording_notifier.events() == ['cod_collected', 'order_delivered']

    def test_double_delivery_is_rejected(self, agent):
        order = OrderFactory(delivery_agent=agent, payment_method='prepaid')
        FulfillmentService.mark_delivered(agent.user, order.id)

        with pytest.raises(InvalidTransition):
            FulfillmentService.mark_delivered(agent.user, order.id)

    def test_cod_collected_only_once(self, agent):
        order = OrderFactory(delivery_agent=agent)
        FulfillmentService.record_cod_payment(agent.user, order.id)

        with pytest.raises(InvalidTransition):
            FulfillmentService.record_cod_payment(agent.user, order.id)

    def test_cod_collection_on_prepaid_order(self, agent):
        order = OrderFactory(delivery_agent=agent, payment_method='prepaid')

        with pytest.raises(ValidationError):
            FulfillmentService.record_cod_payment(agent.user, order.id)

    def test_only_assigned_agent_may_deliver(self, agent):
        order = OrderFactory(delivery_agent=agent, payment_method='prepaid')
        other = DeliveryAgentFactory()

        with pytest.raises(Unauthorized):
            FulfillmentService.mark_delivered(other.user, order.id)
        with pytest.raises(Unauthorized):
            FulfillmentService.mark_delivered(order.user, order.id)

    def test_confirm_prepaid_payment(self, customer):
        order = OrderFactory(user=customer, payment_method='prepaid')
        verifier = PaymentVerifier('secret')
        payload = {'payment_id': 'pay_123', 'signature': verifier.sign(order.order_ref, 'pay_123')}

        FulfillmentService.confirm_payment(customer, order.id, payload, verifier=verifier)

        order.refresh_from_db()
        assert order.is_paid
        assert order.payment_result['id'] == 'pay_123'
        with pytest.raises(InvalidTransition):
            FulfillmentService.confirm_payment(customer, order.id, payload, verifier=verifier)

    def test_bad_signature_leaves_order_unpaid(self, customer):
        order = OrderFactory(user=customer, payment_method='prepaid')
        payload = {'payment_id': 'pay_123', 'signature': 'forged'}

        with pytest.raises(PaymentVerificationFailed):
            FulfillmentService.confirm_payment(customer, order.id, payload, verifier=PaymentVerifier('secret'))

        order.refresh_from_db()
        assert not order.is_paid

    def test_cod_orders_are_not_paid_by_callback(self, customer):
        order = OrderFactory(user=customer, payment_method='cod')

        with pytest.raises(ValidationError):
            FulfillmentService.confirm_payment(customer, order.id, {'payment_id': 'x', 'signature': 'y'})


@pytest.mark.django_db
class TestReturnWorkflow:

    def test_request_on_undelivered_order(self, customer):
        order = OrderFactory(user=customer)

        with pytest.raises(InvalidTransition):
            ReturnService.request_return_exchange(customer, order.id, 'return', 'damaged')

    def test_request_then_duplicate(self, customer, recording_notifier):
        order = delivered_order(user=customer)

        request = ReturnService.request_return_exchange(
            customer, order.id, 'return', 'damaged', notifier=recording_notifier
        )
        assert request.status == 'pending'
        assert request.requested_at is not None
        assert recording_notifier.events() == ['return_requested']

        with pytest.raises(InvalidTransition):
            ReturnService.request_return_exchange(customer, order.id, 'exchange', 'wrong size')

    def test_only_owner_can_request(self, customer):
        order = delivered_order(user=customer)

        with pytest.raises(Unauthorized):
            ReturnService.request_return_exchange(UserFactory(), order.id, 'return', 'damaged')
        with pytest.raises(Unauthorized):
            ReturnService.request_return_exchange(AdminFactory(), order.id, 'return', 'damaged')

    def test_reason_and_type_are_required(self, customer):
        order = delivered_order(user=customer)

        with pytest.raises(ValidationError):
            ReturnService.request_return_exchange(customer, order.id, 'return', '   ')
        with pytest.raises(ValidationError):
            ReturnService.request_return_exchange(customer, order.id, 'none', 'damaged')

    def test_refund_flag_flips_exactly_at_completion(self, customer):
        order = delivered_order(user=customer)
        agent_user = order.delivery_agent.user
        admin = AdminFactory()
        ReturnService.request_return_exchange(customer, order.id, 'return', 'damaged')

        ReturnService.update_status(admin, order.id, 'approved', 'Approved for pickup')
        order.refresh_from_db()
        assert not order.is_refunded

        ReturnService.update_status(agent_user, order.id, 'pickedUp')
        order.refresh_from_db()
        assert not order.is_refunded

        ReturnService.update_status(agent_user, order.id, 'completed')
        order.refresh_from_db()
        assert order.is_refunded
        assert order.refunded_at is not None
        assert order.return_request.admin_comment == 'Approved for pickup'

    def test_completed_exchange_is_not_refunded(self, customer):
        order = delivered_order(user=customer)
        admin = AdminFactory()
        ReturnService.request_return_exchange(customer, order.id, 'exchange', 'wrong size')
        for status in ('approved', 'pickedUp', 'completed'):
            ReturnService.update_status(admin, order.id, status)

        order.refresh_from_db()
        assert order.return_request.status == 'completed'
        assert not order.is_refunded

    def test_agent_cannot_approve(self, customer):
        order = delivered_order(user=customer)
        ReturnService.request_return_exchange(customer, order.id, 'return', 'damaged')

        with pytest.raises(Unauthorized):
            ReturnService.update_status(order.delivery_agent.user, order.id, 'approved')

    def test_unassigned_agent_and_customer_cannot_update(self, customer):
        order = delivered_order(user=customer)
        ReturnService.request_return_exchange(customer, order.id, 'return', 'damaged')
        ReturnService.update_status(AdminFactory(), order.id, 'approved')

        with pytest.raises(Unauthorized):
            ReturnService.update_status(DeliveryAgentFactory().user, order.id, 'pickedUp')
        with pytest.raises(Unauthorized):
            ReturnService.update_status(customer, order.id, 'pickedUp')

    def test_steps_cannot_be_skipped(self, customer):
        order = delivered_order(user=customer)
        admin = AdminFactory()

        with pytest.raises(InvalidTransition):
            ReturnService.update_status(admin, order.id, 'approved')

        ReturnService.request_return_exchange(customer, order.id, 'return', 'damaged')
        with pytest.raises(InvalidTransition):
            ReturnService.update_status(admin, order.id, 'completed')

        ReturnService.update_status(admin, order.id, 'rejected')
        with pytest.raises(InvalidTransition):
            ReturnService.update_status(admin, order.id, 'approved')
        order.refresh_from_db()
        assert not order.is_refunded


@pytest.mark.django_db
class TestLifecycleProperties(TestCase):

    @given(
        request_type=st.sampled_from(['return', 'exchange']),
        steps=st.integers(min_value=0, max_value=3),
    )
    @settings(max_examples=20, deadline=None)
    def test_refunded_only_for_completed_returns(self, request_type, steps):
        order = delivered_order()
        admin = AdminFactory()
        ReturnService.request_return_exchange(order.user, order.id, request_type, 'reason')
        for status in ('approved', 'pickedUp', 'completed')[:steps]:
            ReturnService.update_status(admin, order.id, status)

        order.refresh_from_db()
        self.assertEqual(order.is_refunded, request_type == 'return' and steps == 3)

    @given(second_type=st.sampled_from(['return', 'exchange']))
    @settings(max_examples=5, deadline=None)
    def test_second_request_always_rejected(self, second_type):
        order = delivered_order()
        ReturnService.request_return_exchange(order.user, order.id, 'return', 'first')

        with self.assertRaises(InvalidTransition):
            ReturnService.request_return_exchange(order.user, order.id, second_type, 'second')
        self.assertEqual(ReturnExchangeRequest.objects.get(order=order).request_type, 'return')

    @given(collected=st.booleans(), method=st.sampled_from(['cod', 'prepaid']))
    @settings(max_examples=10, deadline=None)
    def test_cod_guard(self, collected, method):
        agent = DeliveryAgentFactory()
        order = OrderFactory(delivery_agent=agent, payment_method=method, cod_payment_received=collected)

        if method == 'cod' and not collected:
            with self.assertRaises(InvalidTransition):
                FulfillmentService.mark_delivered(agent.user, order.id)
        else:
            FulfillmentService.mark_delivered(agent.user, order.id)

        order.refresh_from_db()
        self.assertEqual(order.is_delivered, method == 'prepaid' or collected)


@pytest.mark.django_db
def test_ledger_entries_reference_order(customer):
    order = OrderService.create_order(
        customer, order_items((1000, 1)), address(), 'prepaid', ledger=LoyaltyLedger(loyalty_config())
    )

    entry = PointsEntry.objects.get(account__user=customer)
    assert entry.order == order
    assert entry.points == 10
