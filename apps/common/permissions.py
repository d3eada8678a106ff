"""
Role-based permission classes shared by the order, delivery and loyalty apps
"""
from rest_framework.permissions import BasePermission


class IsAdminRole(BasePermission):
    """Store administrators (role=admin, or Django staff)"""
    message = 'Administrator access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_admin_role)


class IsDeliveryAgent(BasePermission):
    message = 'Delivery agent access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_delivery_agent)


class IsAdminOrDeliveryAgent(BasePermission):
    message = 'Administrator or delivery agent access required'

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated
            and (user.is_admin_role or user.is_delivery_agent)
        )
