"""
Delivery serializers module.
"""
from .agent_serializers import (
    DeliveryAgentSerializer, AgentRegistrationSerializer,
    AgentUpdateSerializer, AgentStatusSerializer
)

__all__ = [
    'DeliveryAgentSerializer',
    'AgentRegistrationSerializer',
    'AgentUpdateSerializer',
    'AgentStatusSerializer',
]
