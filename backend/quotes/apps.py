from django.apps import AppConfig


class QuotesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.quotes'

    def ready(self):
        from .registration import register
        register()
