from django.contrib import admin
from .models import LoyaltyAccount, PointsEntry


class PointsEntryInline(admin.TabularInline):
    model = PointsEntry
    fields = ['created_at', 'points', 'category', 'description', 'order', 'balance_after']
    readonly_fields = fields
    extra = 0
    can_delete = False
    ordering = ['-created_at']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(LoyaltyAccount)
class LoyaltyAccountAdmin(admin.ModelAdmin):
    list_display = ['user', 'points', 'tier', 'total_spent', 'referral_code', 'created_at']
    list_filter = ['tier']
    search_fields = ['user__username', 'user__email', 'referral_code']
    raw_id_fields = ['user', 'referred_by']
    # Balances only change through LoyaltyLedger so entries stay in step
    readonly_fields = ['points', 'total_spent', 'tier', 'created_at', 'updated_at']
    inlines = [PointsEntryInline]


@admin.register(PointsEntry)
class PointsEntryAdmin(admin.ModelAdmin):
    list_display = ['account', 'points', 'category', 'balance_after', 'created_at']
    list_filter = ['category', 'created_at']
    search_fields = ['account__user__username', 'description']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
