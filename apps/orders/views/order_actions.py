"""
Order action views: delivery, payment and return/exchange.
"""
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from apps.common.permissions import IsDeliveryAgent, IsAdminOrDeliveryAgent
from apps.common.utils import success_response, error_response
from ..serializers import (
    OrderSerializer, ReturnExchangeRequestSerializer,
    PaymentCallbackSerializer, ReturnRequestSerializer, ReturnStatusSerializer
)
from ..services import OrderService, FulfillmentService, ReturnService


class DeliverOrderView(APIView):
    """Mark an order delivered (delivery agents)"""
    permission_classes = [IsDeliveryAgent]

    def put(self, request, order_id):
        FulfillmentService.mark_delivered(request.user, order_id)
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, 'Order marked as delivered')


class CodPaymentView(APIView):
    """Record cash collected on delivery (delivery agents)"""
    permission_classes = [IsDeliveryAgent]

    def put(self, request, order_id):
        FulfillmentService.record_cod_payment(request.user, order_id)
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, 'COD payment recorded')


class PayOrderView(APIView):
    """Confirm a prepaid order with the gateway's signed callback"""
    permission_classes = [IsAuthenticated]

    def put(self, request, order_id):
        serializer = PaymentCallbackSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid payment data", serializer.errors)

        FulfillmentService.confirm_payment(request.user, order_id, serializer.validated_data)
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, 'Payment verified successfully')


class ReturnExchangeRequestView(APIView):
    """File a return or exchange (order owner)"""
    permission_classes = [IsAuthenticated]

    def post(self, request, order_id):
        serializer = ReturnRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid return/exchange request", serializer.errors)

        data = serializer.validated_data
        return_request = ReturnService.request_return_exchange(
            request.user, order_id, data['request_type'], data['reason']
        )
        return success_response(
            ReturnExchangeRequestSerializer(return_request).data,
            f"{data['request_type'].title()} request submitted",
            status_code=status.HTTP_201_CREATED
        )


class ReturnExchangeStatusView(APIView):
    """Advance a return/exchange request (admins, assigned delivery agent)"""
    permission_classes = [IsAdminOrDeliveryAgent]

    def put(self, request, order_id):
        serializer = ReturnStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid status update", serializer.errors)

        data = serializer.validated_data
        ReturnService.update_status(request.user, order_id, data['status'], data['admin_comment'])
        order = OrderService.get_order(order_id)
        return success_response(OrderSerializer(order).data, 'Return/exchange status updated')
