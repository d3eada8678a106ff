"""
Delivery agent assignment.

An order destination (city, pincode) is matched to the least loaded active
agent, preferring agents that serve the exact pincode, then agents serving
the city, then anyone. Load is the number of assigned orders not yet
delivered and is counted from the orders table on every call, so concurrent
checkouts may both see the same agent as least loaded. Balance is best
effort, not guaranteed.
"""
import logging

from django.db.models import Count, Q

from apps.common.utils import normalize_city, normalize_pincode
from apps.orders.models import Order
from ..models import DeliveryAgent

logger = logging.getLogger(__name__)


class AssignmentService:
    """Pick delivery agents for new orders"""

    @staticmethod
    def agent_loads():
        """
        Map agent id -> number of assigned, undelivered orders.

        One grouped query over (delivery_agent, is_delivered). Agents with no
        open orders are absent from the map.
        """
        rows = (
            Order.objects
            .filter(delivery_agent__isnull=False, is_delivered=False)
            .values('delivery_agent')
            .annotate(open_orders=Count('id'))
        )
        return {row['delivery_agent']: row['open_orders'] for row in rows}

    @staticmethod
    def _least_loaded(candidates, loads):
        # min() keeps the first of equal keys, so ties go to the lowest id
        return min(candidates, key=lambda agent: loads.get(agent.id, 0))

    @staticmethod
    def assign_agent(city, pincode):
        """
        Choose an agent for a shipping destination.

        Args:
            city: Shipping city, compared trimmed and case-insensitively
            pincode: Shipping pincode

        Returns:
            DeliveryAgent or None when no active agent exists
        """
        city = normalize_city(city)
        pincode = normalize_pincode(pincode)

        agents = list(DeliveryAgent.objects.filter(is_active=True).order_by('id'))
        if not agents:
            logger.warning(f"No delivery agent available for {city or '-'}/{pincode or '-'}")
            return None

        loads = AssignmentService.agent_loads()

        matched_by = 'pincode'
        candidates = [agent for agent in agents if pincode and agent.serves_pincode(pincode)]
        if not candidates:
            matched_by = 'city'
            candidates = [agent for agent in agents if agent.serves_city(city)]
        if not candidates:
            matched_by = 'global'
            candidates = agents

        agent = AssignmentService._least_loaded(candidates, loads)
        logger.info(
            f"Assigned agent {agent.id} to {city or '-'}/{pincode or '-'} "
            f"by {matched_by} match (load {loads.get(agent.id, 0)})"
        )
        return agent

    @staticmethod
    def agent_stats():
        """
        Live order counts for every agent, in id order.

        Returns:
            list of (agent, stats dict) with active_orders, total_delivered
            and total_assigned
        """
        agents = (
            DeliveryAgent.objects
            .select_related('user')
            .annotate(
                total_assigned=Count('orders'),
                total_delivered=Count('orders', filter=Q(orders__is_delivered=True)),
                active_orders=Count('orders', filter=Q(orders__is_delivered=False)),
            )
            .order_by('id')
        )
        return [
            (agent, {
                'active_orders': agent.active_orders,
                'total_delivered': agent.total_delivered,
                'total_assigned': agent.total_assigned,
            })
            for agent in agents
        ]
