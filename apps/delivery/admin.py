from django.contrib import admin
from .models import DeliveryAgent


@admin.register(DeliveryAgent)
class DeliveryAgentAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'phone', 'service_area', 'is_active', 'created_at']
    list_filter = ['is_active', 'service_area']
    search_fields = ['name', 'phone', 'user__email', 'service_area']
    raw_id_fields = ['user']
    readonly_fields = ['created_at', 'updated_at']
