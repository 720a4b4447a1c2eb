from django.db.models.signals import post_save
from django.dispatch import receiver
from backend.core.models import Company
from .services import initialize_company_settings


@receiver(post_save, sender=Company)
def create_company_settings(sender, instance, created, **kwargs):
    if created:
        initialize_company_settings(instance)
