from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Store account with a role that drives what the API lets it do"""

    ROLE_CUSTOMER = 'customer'
    ROLE_ADMIN = 'admin'
    ROLE_DELIVERY = 'delivery'

    ROLE_CHOICES = [
        (ROLE_CUSTOMER, 'Customer'),
        (ROLE_ADMIN, 'Admin'),
        (ROLE_DELIVERY, 'Delivery agent'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)
    phone = models.CharField(max_length=20, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.username or self.email or f"User {self.id}"

    @property
    def is_admin_role(self):
        """Staff and superusers are treated as admins"""
        return self.role == self.ROLE_ADMIN or self.is_staff or self.is_superuser

    @property
    def is_delivery_agent(self):
        return self.role == self.ROLE_DELIVERY
