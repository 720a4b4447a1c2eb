from django.contrib import admin
from .models import UnitOfMeasure, Product


@admin.register(UnitOfMeasure)
class UnitOfMeasureAdmin(admin.ModelAdmin):
    list_display = ['uom_name', 'type', 'base_to_type', 'company']
    list_filter = ['type', 'company']
    search_fields = ['uom_name', 'type']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'sales_category', 'sales_unit_price', 'sales_unit_price_currency', 'vat_percent', 'company']
    list_filter = ['company', 'sales_category']
    search_fields = ['name', 'sales_category']
    readonly_fields = ['created_date']
