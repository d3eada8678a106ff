"""
User registration and profile views.

Token issue and refresh are served by simplejwt's own views (see urls.py).
"""
import logging

from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common.utils import success_response, error_response
from ..serializers import UserDetailSerializer, UserRegistrationSerializer

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """Customer registration endpoint"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            refresh = RefreshToken.for_user(user)
            logger.info(f"Registered customer {user.id}")
            return success_response({
                'token': str(refresh.access_token),
                'refresh': str(refresh),
                'user': UserDetailSerializer(user).data
            }, 'Registration successful', status_code=201)
        return error_response('Registration failed', serializer.errors)


class CurrentUserView(APIView):
    """Return the authenticated account"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return success_response(UserDetailSerializer(request.user).data)
