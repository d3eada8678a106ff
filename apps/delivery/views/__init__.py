"""
Delivery views module.
"""
from .agent_views import (
    register_agent, list_agents, update_agent, update_agent_status
)

__all__ = [
    'register_agent',
    'list_agents',
    'update_agent',
    'update_agent_status',
]
