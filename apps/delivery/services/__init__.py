"""
Delivery services module.
"""
from .assignment_service import AssignmentService
from .agent_service import AgentService

__all__ = [
    'AssignmentService',
    'AgentService',
]
