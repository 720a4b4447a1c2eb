from django.contrib import admin
from .models import Account


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ['name', 'industry', 'owner', 'company', 'is_legal_entity', 'is_person_account', 'created_date']
    list_filter = ['company', 'industry', 'is_legal_entity', 'is_person_account', 'is_self_employed']
    search_fields = ['name', 'email', 'company_official_name', 'tax_id']
    raw_id_fields = ['owner', 'parent_account']
    readonly_fields = ['created_date']
