from django.contrib import admin
from .models import (
    CompanyRole, UserRoleAssignment, Release, Translation,
    CompanySettingMasterDomain, CompanySettingMasterFunctionality, CompanySettingsMaster, CompanySetting
)


@admin.register(CompanyRole)
class CompanyRoleAdmin(admin.ModelAdmin):
    list_display = ['name', 'parent_company_role', 'company']
    list_filter = ['company']
    search_fields = ['name']


@admin.register(UserRoleAssignment)
class UserRoleAssignmentAdmin(admin.ModelAdmin):
    list_display = ['user', 'company_role', 'created_date']
    raw_id_fields = ['user', 'company_role']


@admin.register(Release)
class ReleaseAdmin(admin.ModelAdmin):
    list_display = ['release_name', 'order', 'status', 'company']
    list_filter = ['status', 'company']


@admin.register(Translation)
class TranslationAdmin(admin.ModelAdmin):
    list_display = ['label_code', 'language_code', 'label_content']
    list_filter = ['language_code']
    search_fields = ['label_code', 'label_content']


@admin.register(CompanySettingMasterDomain)
class CompanySettingMasterDomainAdmin(admin.ModelAdmin):
    list_display = ['code', 'name']


@admin.register(CompanySettingMasterFunctionality)
class CompanySettingMasterFunctionalityAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'domain']
    list_filter = ['domain']


@admin.register(CompanySettingsMaster)
class CompanySettingsMasterAdmin(admin.ModelAdmin):
    list_display = [
        'setting_code', 'setting_name', 'setting_functional_domain_code', 'setting_functionality_code',
        'default_value', 'setting_once_enabled_cannot_be_disabled'
    ]
    list_filter = ['setting_functional_domain_code']
    search_fields = ['setting_code', 'setting_name']


@admin.register(CompanySetting)
class CompanySettingAdmin(admin.ModelAdmin):
    list_display = ['setting_code', 'setting_value', 'company', 'last_updated_date']
    list_filter = ['company']
    search_fields = ['setting_code']
    readonly_fields = ['created_date', 'last_updated_date']
