"""
Order creation and query views.
"""
import logging

from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from apps.common.permissions import IsAdminRole
from apps.common.utils import success_response, error_response
from ..serializers import OrderSerializer, OrderCreateSerializer
from ..services import OrderService
from .pagination import paginated_orders, parse_flag

logger = logging.getLogger(__name__)


class OrderCollectionView(APIView):
    """
    POST: place an order (any signed-in user)
    GET: every order (admins only)
    """

    def get_permissions(self):
        if self.request.method == 'GET':
            return [IsAdminRole()]
        return [IsAuthenticated()]

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.info(f"Rejected order from user {request.user.id}: {serializer.errors}")
            return error_response("Invalid order data", serializer.errors)

        data = serializer.validated_data
        order = OrderService.create_order(
            request.user,
            items=data['items'],
            shipping_address=data['shipping_address'],
            payment_method=data['payment_method'],
            reward_points_to_redeem=data['reward_points_to_redeem'],
            shipping_price=data['shipping_price'],
            tax_price=data['tax_price'],
        )

        payload = OrderSerializer(order).data
        payload['delivery_agent_assigned'] = order.delivery_agent_id is not None
        message = 'Order created successfully'
        if order.delivery_agent_id is None:
            message = 'Order created; a delivery agent will be assigned manually'
        return success_response(payload, message, status_code=status.HTTP_201_CREATED)

    def get(self, request):
        filters = {
            'is_paid': parse_flag(request.GET.get('is_paid')),
            'is_delivered': parse_flag(request.GET.get('is_delivered')),
            'payment_method': request.GET.get('payment_method'),
        }
        return success_response(paginated_orders(request, OrderService.list_all_orders(filters)))


class MyOrdersView(APIView):
    """Orders placed by the signed-in user"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return success_response(paginated_orders(request, OrderService.list_user_orders(request.user)))


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        order = OrderService.get_order_for(request.user, order_id)
        return success_response(OrderSerializer(order).data)
