from django.db import models
from django.conf import settings
from django.core.exceptions import ValidationError

from apps.common.utils import normalize_city, normalize_pincode


class DeliveryAgent(models.Model):
    """
    Delivery agent profile.

    The number of undelivered orders an agent carries is not stored here;
    AssignmentService counts it from the orders table on every call.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='delivery_profile'
    )
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20, blank=True, default='')
    service_area = models.CharField(max_length=100, blank=True, default='', help_text="City served")
    service_pincodes = models.JSONField(default=list, blank=True, help_text="Pincodes served")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'delivery_agents'
        ordering = ['id']
        indexes = [
            models.Index(fields=['is_active']),
            models.Index(fields=['service_area']),
        ]

    def __str__(self):
        return f"{self.name} ({self.service_area or 'unassigned area'})"

    def _pincode_list(self):
        """service_pincodes as a list; a single pincode is wrapped"""
        value = self.service_pincodes
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return [value]
        raise ValidationError({'service_pincodes': 'Enter a pincode or a list of pincodes'})

    def clean(self):
        super().clean()
        self._pincode_list()

    def save(self, *args, **kwargs):
        # Stored trimmed and de-duplicated, first occurrence wins
        seen = []
        for pincode in self._pincode_list():
            pincode = normalize_pincode(pincode)
            if pincode and pincode not in seen:
                seen.append(pincode)
        self.service_pincodes = seen
        self.service_area = (self.service_area or '').strip()
        super().save(*args, **kwargs)

    def serves_pincode(self, pincode):
        return normalize_pincode(pincode) in set(self.service_pincodes or [])

    def serves_city(self, city):
        city = normalize_city(city)
        return bool(city) and normalize_city(self.service_area) == city
