"""
Order views module.
"""
from .order_views import OrderCollectionView, MyOrdersView, OrderDetailView
from .order_actions import (
    DeliverOrderView, CodPaymentView, PayOrderView,
    ReturnExchangeRequestView, ReturnExchangeStatusView
)
from .admin_order_views import DeliveryOrdersView

__all__ = [
    'OrderCollectionView',
    'MyOrdersView',
    'OrderDetailView',
    'DeliverOrderView',
    'CodPaymentView',
    'PayOrderView',
    'ReturnExchangeRequestView',
    'ReturnExchangeStatusView',
    'DeliveryOrdersView',
]
