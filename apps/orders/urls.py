from django.urls import path
from . import views

urlpatterns = [
    path('', views.OrderCollectionView.as_view(), name='order-list-create'),
    path('mine/', views.MyOrdersView.as_view(), name='order-mine'),
    path('delivery/', views.DeliveryOrdersView.as_view(), name='order-delivery'),
    path('<int:order_id>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<int:order_id>/deliver/', views.DeliverOrderView.as_view(), name='order-deliver'),
    path('<int:order_id>/cod-payment/', views.CodPaymentView.as_view(), name='order-cod-payment'),
    path('<int:order_id>/pay/', views.PayOrderView.as_view(), name='order-pay'),
    path('<int:order_id>/return-exchange/', views.ReturnExchangeRequestView.as_view(), name='order-return-exchange'),
    path(
        '<int:order_id>/return-exchange-status/',
        views.ReturnExchangeStatusView.as_view(),
        name='order-return-exchange-status'
    ),
]
