from django.db import models
from backend.core.models import Company


class UnitOfMeasure(models.Model):
    """Sales unit (piece, hour, kg, ...) of a company"""
    type = models.CharField(max_length=100, help_text="Dimension, e.g. Quantity, Time, Weight")
    uom_name = models.CharField(max_length=100)
    base_to_type = models.BooleanField(default=False, help_text="Base unit of its type")
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='unit_of_measures')
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.uom_name

    class Meta:
        db_table = 'unit_of_measures'
        ordering = ['type', 'uom_name']


class Product(models.Model):
    sales_category = models.CharField(max_length=100, blank=True)
    name = models.CharField(max_length=255)
    sales_uom = models.ForeignKey(UnitOfMeasure, on_delete=models.PROTECT, null=True, blank=True, related_name='products')
    sales_unit_price = models.DecimalField(max_digits=17, decimal_places=5, null=True, blank=True)
    sales_unit_price_currency = models.CharField(max_length=3, blank=True)
    vat_percent = models.DecimalField(max_digits=17, decimal_places=5, null=True, blank=True)
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='products')
    custom_fields = models.JSONField(default=dict, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'products'
        ordering = ['name']
        indexes = [
            models.Index(fields=['company', 'name'], name='products_company_name_idx'),
        ]
