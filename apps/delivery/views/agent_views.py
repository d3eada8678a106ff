"""
Admin endpoints for the delivery agent directory.
"""
import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from apps.common.permissions import IsAdminRole
from apps.common.utils import success_response, error_response
from ..serializers import (
    DeliveryAgentSerializer, AgentRegistrationSerializer,
    AgentUpdateSerializer, AgentStatusSerializer
)
from ..services import AgentService, AssignmentService

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([IsAdminRole])
def register_agent(request):
    """Create a delivery agent login and profile"""
    serializer = AgentRegistrationSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid agent details', serializer.errors)

    agent = AgentService.register_agent(request.user, **serializer.validated_data)
    return success_response(
        DeliveryAgentSerializer(agent).data,
        'Delivery agent registered',
        status_code=status.HTTP_201_CREATED
    )


@api_view(['GET'])
@permission_classes([IsAdminRole])
def list_agents(request):
    """All agents with active, delivered and assigned order counts"""
    rows = AssignmentService.agent_stats()
    agents = [agent for agent, _ in rows]
    stats = {agent.id: agent_stats for agent, agent_stats in rows}
    serializer = DeliveryAgentSerializer(agents, many=True, context={'stats': stats})
    return success_response(serializer.data)


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAdminRole])
def update_agent(request, agent_id):
    serializer = AgentUpdateSerializer(data=request.data, partial=True)
    if not serializer.is_valid():
        return error_response('Invalid agent details', serializer.errors)

    agent = AgentService.update_agent(request.user, agent_id, **serializer.validated_data)
    return success_response(DeliveryAgentSerializer(agent).data, 'Delivery agent updated')


@api_view(['PUT'])
@permission_classes([IsAdminRole])
def update_agent_status(request, agent_id):
    serializer = AgentStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('is_active is required', serializer.errors)

    agent = AgentService.set_active(request.user, agent_id, serializer.validated_data['is_active'])
    message = 'Delivery agent activated' if agent.is_active else 'Delivery agent deactivated'
    return success_response(DeliveryAgentSerializer(agent).data, message)
