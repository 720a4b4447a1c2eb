from django.apps import AppConfig


class MetadataConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.metadata'

    def ready(self):
        """Import signals when app is ready"""
        import backend.metadata.signals  # noqa: F401  # Cache invalidation signals
