"""
JWT authentication tolerant of tokens for deleted or deactivated users
"""
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken
from rest_framework_simplejwt.settings import api_settings
from django.contrib.auth import get_user_model
import logging

logger = logging.getLogger(__name__)


class SafeJWTAuthentication(JWTAuthentication):
    """
    Returns no user instead of failing when the token's user is gone.

    Customers, admins and delivery agents all authenticate through this class;
    the request then proceeds as anonymous and the view's permission classes
    decide what happens next.
    """

    def get_user(self, validated_token):
        User = get_user_model()
        user_id = validated_token.get(api_settings.USER_ID_CLAIM)
        if user_id is None:
            raise InvalidToken('Token contained no recognizable user identification')

        try:
            user = User.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except User.DoesNotExist:
            logger.warning(f'JWT token contains unknown user_id: {user_id}')
            return None

        if not user.is_active:
            logger.warning(f'JWT token presented for inactive user {user_id}')
            return None
        return user
