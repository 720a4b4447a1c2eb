from django.apps import AppConfig


class ProductsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backend.products'

    def ready(self):
        from .registration import register
        register()
