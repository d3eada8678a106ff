from django.apps import AppConfig


class LoyaltyAppConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.loyalty'
    verbose_name = 'Loyalty'

    def ready(self):
        import apps.loyalty.signals  # noqa: F401
