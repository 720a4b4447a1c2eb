from django.apps import AppConfig


class AssetsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.assets'

    def ready(self):
        from .registration import register
        register()
