"""
User views module.
"""
from .auth_views import RegisterView, CurrentUserView

__all__ = [
    'RegisterView',
    'CurrentUserView',
]
