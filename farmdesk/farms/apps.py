from django.apps import AppConfig


class FarmsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'farmdesk.farms'

    def ready(self):
        """Import signals when app is ready"""
        import farmdesk.farms.signals  # noqa: F401  # Access cache invalidation signals
