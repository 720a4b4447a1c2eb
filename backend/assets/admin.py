from django.contrib import admin
from .models import Asset


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ['name', 'serial_number', 'product', 'account', 'install_status', 'company']
    list_filter = ['install_status', 'company']
    search_fields = ['name', 'serial_number']
    raw_id_fields = ['product', 'account']
    readonly_fields = ['created_date']
