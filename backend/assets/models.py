from django.db import models
from backend.core.models import Company


class Asset(models.Model):
    """Installed base item: a product delivered to an account"""
    INSTALL_STATUS_CHOICES = [
        ('Planned', 'Planned'),
        ('Installed', 'Installed'),
        ('Decommissioned', 'Decommissioned'),
    ]

    name = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    quantity = models.DecimalField(max_digits=17, decimal_places=5, null=True, blank=True)
    serial_number = models.CharField(max_length=255)
    installation_date = models.DateField(null=True, blank=True)
    product = models.ForeignKey('products.Product', on_delete=models.PROTECT, null=True, blank=True, related_name='assets')
    account = models.ForeignKey('accounts.Account', on_delete=models.PROTECT, null=True, blank=True, related_name='assets')
    location_street_address = models.CharField(max_length=255, blank=True)
    location_city = models.CharField(max_length=100, blank=True)
    location_state_province = models.CharField(max_length=100, blank=True)
    location_zip_code = models.CharField(max_length=20, blank=True)
    location_country = models.CharField(max_length=100, blank=True)
    install_status = models.CharField(max_length=20, choices=INSTALL_STATUS_CHOICES, default='Planned')
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='assets')
    custom_fields = models.JSONField(default=dict, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name or self.serial_number

    class Meta:
        db_table = 'assets'
        ordering = ['name']
