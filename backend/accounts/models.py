from django.conf import settings
from django.db import models
from backend.core.models import Company


class Account(models.Model):
    """Customer account: a person, a legal entity, a contact or a shipping address"""
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)
    email = models.EmailField(blank=True)
    mobile_phone = models.CharField(max_length=50, blank=True)
    is_person_account = models.BooleanField(default=False)
    is_self_employed = models.BooleanField(default=False)
    is_legal_entity = models.BooleanField(default=False)
    is_shipping_address = models.BooleanField(default=False)
    is_company_contact = models.BooleanField(default=False)
    name = models.CharField(max_length=255)
    company_official_name = models.CharField(max_length=255, blank=True)
    company_registration_id = models.CharField(max_length=100, blank=True)
    tax_id = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    address_street_address = models.CharField(max_length=255, blank=True)
    address_city = models.CharField(max_length=100, blank=True)
    address_state_province = models.CharField(max_length=100, blank=True)
    address_zip_code = models.CharField(max_length=20, blank=True)
    address_country = models.CharField(max_length=100, blank=True)
    industry = models.CharField(max_length=100, blank=True)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='owned_accounts')
    parent_account = models.ForeignKey('self', on_delete=models.PROTECT, null=True, blank=True, related_name='child_accounts')
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='accounts')
    custom_fields = models.JSONField(default=dict, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'accounts'
        ordering = ['name']
        indexes = [
            models.Index(fields=['company', 'name'], name='accounts_company_name_idx'),
        ]
