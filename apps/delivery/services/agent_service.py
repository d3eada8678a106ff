"""
Admin management of delivery agent accounts.
"""
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q

from apps.common.exceptions import NotFound, ValidationError
from ..models import DeliveryAgent

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger('audit')

User = get_user_model()

UPDATABLE_FIELDS = ('name', 'phone', 'service_area', 'service_pincodes')


class AgentService:
    """Register, edit and (de)activate delivery agents"""

    @staticmethod
    def get_agent(agent_id):
        try:
            return DeliveryAgent.objects.select_related('user').get(id=agent_id)
        except DeliveryAgent.DoesNotExist:
            raise NotFound(f'Delivery agent {agent_id} not found')

    @staticmethod
    @transaction.atomic
    def register_agent(admin, name, email, password, phone='', service_area='', service_pincodes=None):
        """
        Create a login with the delivery role and its agent profile.

        Raises:
            ValidationError: If the email is already registered or taken as a username
        """
        email = email.strip().lower()
        # The email doubles as the login username
        if User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).exists():
            raise ValidationError('A user with this email already exists')

        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            phone=phone or None,
            first_name=name,
            role=User.ROLE_DELIVERY,
        )
        agent = DeliveryAgent.objects.create(
            user=user,
            name=name,
            phone=phone,
            service_area=service_area,
            service_pincodes=list(service_pincodes or []),
        )
        audit_logger.info(f"admin={admin.id} registered delivery agent {agent.id} ({email})")
        return agent

    @staticmethod
    def update_agent(admin, agent_id, **changes):
        """Update the directory fields of an agent"""
        agent = AgentService.get_agent(agent_id)
        updated = []
        for field in UPDATABLE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(agent, field, changes[field])
                updated.append(field)
        if updated:
            agent.save()
            if 'phone' in updated:
                agent.user.phone = agent.phone or None
                agent.user.save(update_fields=['phone'])
            audit_logger.info(f"admin={admin.id} updated delivery agent {agent.id}: {', '.join(updated)}")
        return agent

    @staticmethod
    def set_active(admin, agent_id, is_active):
        """
        Activate or deactivate an agent.

        Inactive agents keep their open orders but receive no new ones.
        """
        agent = AgentService.get_agent(agent_id)
        agent.is_active = bool(is_active)
        agent.save(update_fields=['is_active', 'updated_at'])
        audit_logger.info(f"admin={admin.id} set delivery agent {agent.id} active={agent.is_active}")
        return agent
