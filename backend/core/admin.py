from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User, Company, AuditLog


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ['company_official_name', 'company_alias', 'company_registration_id', 'tax_residency_country', 'created_date']
    search_fields = ['company_official_name', 'company_alias', 'company_registration_id']
    ordering = ['company_official_name']
    readonly_fields = ['created_date']


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['username', 'email', 'first_name', 'last_name', 'company', 'is_company_admin', 'is_active']
    list_filter = ['is_active', 'is_company_admin', 'is_global_admin', 'company']
    search_fields = ['username', 'email', 'first_name', 'last_name']
    ordering = ['username']
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Company', {'fields': ('phone', 'company', 'company_context', 'is_company_admin', 'is_global_admin',
                                'preferred_language', 'timezone')}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Company', {'fields': ('phone', 'company', 'is_company_admin')}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['user', 'company', 'action', 'model_name', 'object_id', 'ip_address', 'created_at']
    list_filter = ['action', 'model_name', 'created_at']
    search_fields = ['user__username', 'model_name', 'object_id', 'object_name']
    ordering = ['-created_at']
    readonly_fields = ['user', 'company', 'action', 'model_name', 'object_id', 'object_name', 'changes', 'ip_address', 'created_at']
