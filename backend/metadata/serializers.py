import re

from rest_framework import serializers
from .models import FieldDefinition, ObjectLayout

API_CODE_PATTERN = re.compile(r'^[a-z][a-z0-9_]*$')


class FieldDefinitionSerializer(serializers.ModelSerializer):
    is_multi_select = serializers.BooleanField(read_only=True)

    class Meta:
        model = FieldDefinition
        fields = [
            'id', 'company', 'object_code', 'api_code', 'label', 'type', 'subtype', 'field_type',
            'help_text', 'placeholder', 'required', 'max_length', 'min_value', 'max_value',
            'decimal_places', 'percentage_display', 'allow_search', 'copyable', 'default_value',
            'value_set', 'lookup_object_code', 'sort_order', 'is_custom', 'is_multi_select', 'extra',
            'created_at', 'updated_at'
        ]
        read_only_fields = ['company', 'object_code', 'is_custom', 'created_at', 'updated_at']

    def validate_api_code(self, value):
        if not API_CODE_PATTERN.match(value):
            raise serializers.ValidationError(
                "API code must start with a letter and contain only lowercase letters, digits and underscores"
            )
        return value

    def validate_value_set(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError("Value set must be a list of options")
        options = []
        for option in value:
            if isinstance(option, dict):
                if 'value' not in option:
                    raise serializers.ValidationError("Each option needs a value")
                options.append({'value': str(option['value']), 'label': str(option.get('label') or option['value'])})
            else:
                options.append({'value': str(option), 'label': str(option)})
        return options

    def validate(self, attrs):
        field_type = attrs.get('type', getattr(self.instance, 'type', None))
        value_set = attrs.get('value_set', getattr(self.instance, 'value_set', None))
        if field_type == 'DropDownListField' and not value_set:
            raise serializers.ValidationError({'value_set': ["Dropdown fields need at least one option"]})
        min_value = attrs.get('min_value', getattr(self.instance, 'min_value', None))
        max_value = attrs.get('max_value', getattr(self.instance, 'max_value', None))
        if min_value is not None and max_value is not None and min_value > max_value:
            raise serializers.ValidationError({'min_value': ["Minimum value cannot exceed maximum value"]})
        return attrs


class ObjectLayoutSerializer(serializers.ModelSerializer):
    is_default = serializers.SerializerMethodField()

    class Meta:
        model = ObjectLayout
        fields = ['id', 'company', 'object_code', 'view_type', 'name', 'definition', 'is_default', 'created_at', 'updated_at']
        read_only_fields = ['company', 'created_at', 'updated_at']
        # One layout per company, object and view is checked in the views
        validators = []

    def get_is_default(self, obj):
        return obj.company_id is None

    def validate(self, attrs):
        view_type = attrs.get('view_type', getattr(self.instance, 'view_type', None))
        definition = attrs.get('definition', getattr(self.instance, 'definition', None)) or {}
        if not isinstance(definition, dict):
            raise serializers.ValidationError({'definition': ["Layout definition must be an object"]})
        if view_type == 'table':
            columns = definition.get('columns')
            if not isinstance(columns, list) or not columns:
                raise serializers.ValidationError({'definition': ["Table layouts need a non-empty 'columns' list"]})
        elif view_type == 'detail':
            sections = definition.get('sections')
            if not isinstance(sections, list) or not sections:
                raise serializers.ValidationError({'definition': ["Detail layouts need a non-empty 'sections' list"]})
            for section in sections:
                if not isinstance(section, dict) or not isinstance(section.get('fields'), list):
                    raise serializers.ValidationError({'definition': ["Every section needs a 'fields' list"]})
        return attrs
