from django.apps import AppConfig


class SetupConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.setup'

    def ready(self):
        from . import signals  # noqa: F401
