"""
User serializers module.
"""
from .user_serializers import UserDetailSerializer, UserRegistrationSerializer

__all__ = [
    'UserDetailSerializer',
    'UserRegistrationSerializer',
]
