"""
Dashboard order lists.
"""
from rest_framework.views import APIView

from apps.common.permissions import IsDeliveryAgent
from apps.common.utils import success_response
from ..services import OrderService
from .pagination import paginated_orders, parse_flag


class DeliveryOrdersView(APIView):
    """Orders assigned to the signed-in delivery agent"""
    permission_classes = [IsDeliveryAgent]

    def get(self, request):
        queryset = OrderService.list_agent_orders(
            request.user, is_delivered=parse_flag(request.GET.get('is_delivered'))
        )
        return success_response(paginated_orders(request, queryset))
