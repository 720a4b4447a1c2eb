from django.contrib import admin
from .models import FieldDefinition, ObjectLayout


@admin.register(FieldDefinition)
class FieldDefinitionAdmin(admin.ModelAdmin):
    list_display = ['object_code', 'api_code', 'label', 'type', 'company', 'required', 'is_custom', 'sort_order']
    list_filter = ['object_code', 'type', 'is_custom', 'required']
    search_fields = ['object_code', 'api_code', 'label']
    ordering = ['object_code', 'sort_order', 'api_code']
    readonly_fields = ['created_at', 'updated_at']


@admin.register(ObjectLayout)
class ObjectLayoutAdmin(admin.ModelAdmin):
    list_display = ['object_code', 'view_type', 'name', 'company', 'updated_at']
    list_filter = ['object_code', 'view_type']
    search_fields = ['object_code', 'name']
    readonly_fields = ['created_at', 'updated_at']
