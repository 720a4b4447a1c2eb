from rest_framework import serializers
from .models import (
    CompanyRole, UserRoleAssignment, Release, Translation,
    CompanySettingMasterDomain, CompanySettingMasterFunctionality, CompanySettingsMaster, CompanySetting
)
from .services import creates_cycle


class CompanyRoleSerializer(serializers.ModelSerializer):
    parent_company_role_name = serializers.CharField(source='parent_company_role.name', read_only=True, default=None)

    class Meta:
        model = CompanyRole
        fields = ['id', 'name', 'parent_company_role', 'parent_company_role_name', 'company', 'created_date']
        read_only_fields = ['company', 'created_date']

    def validate_name(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Role name is required")
        return value.strip()

    def validate_parent_company_role(self, value):
        if value is None:
            return value
        company = self.context.get('company')
        if company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("Parent company role not found")
        if creates_cycle(self.instance, value):
            raise serializers.ValidationError("Cannot create circular reference in company role hierarchy")
        return value


class UserRoleAssignmentSerializer(serializers.ModelSerializer):
    username = serializers.CharField(source='user.username', read_only=True)
    company_role_name = serializers.CharField(source='company_role.name', read_only=True)

    class Meta:
        model = UserRoleAssignment
        fields = ['id', 'user', 'username', 'company_role', 'company_role_name', 'created_date']
        read_only_fields = ['created_date']
        # Duplicates are reported by validate() with a readable message
        validators = []

    def validate_user(self, value):
        company = self.context.get('company')
        if company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("User not found")
        return value

    def validate_company_role(self, value):
        company = self.context.get('company')
        if company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("Company role not found")
        return value

    def validate(self, attrs):
        user = attrs.get('user', getattr(self.instance, 'user', None))
        role = attrs.get('company_role', getattr(self.instance, 'company_role', None))
        duplicates = UserRoleAssignment.objects.filter(user=user, company_role=role)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError({'user': ["User is already assigned to this role"]})
        return attrs


class ReleaseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Release
        fields = ['id', 'release_name', 'release_description', 'order', 'commits', 'status', 'company', 'created_date']
        read_only_fields = ['company', 'created_date']

    def validate_order(self, value):
        if value < 1:
            raise serializers.ValidationError("Order must be at least 1")
        return value


class TranslationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Translation
        fields = ['id', 'label_code', 'label_content', 'language_code', 'created_date']
        read_only_fields = ['created_date']


class CompanySettingMasterDomainSerializer(serializers.ModelSerializer):
    class Meta:
        model = CompanySettingMasterDomain
        fields = ['id', 'code', 'name', 'created_date']
        read_only_fields = ['created_date']


class CompanySettingMasterFunctionalitySerializer(serializers.ModelSerializer):
    domain_code = serializers.CharField(source='domain.code', read_only=True)

    class Meta:
        model = CompanySettingMasterFunctionality
        fields = ['id', 'code', 'name', 'domain', 'domain_code', 'created_date']
        read_only_fields = ['created_date']


class CompanySettingsMasterSerializer(serializers.ModelSerializer):
    allowed_values = serializers.ListField(child=serializers.CharField(), read_only=True)

    class Meta:
        model = CompanySettingsMaster
        fields = [
            'id', 'functionality', 'setting_functional_domain_code', 'setting_functional_domain_name',
            'setting_functionality_code', 'setting_functionality_name', 'setting_code', 'setting_name',
            'setting_description', 'setting_values', 'allowed_values', 'default_value', 'special_value_set',
            'cant_be_true_if_the_following_is_false', 'article_code', 'setting_order_within_functionality',
            'setting_shows_in_level', 'setting_once_enabled_cannot_be_disabled', 'created_date'
        ]
        read_only_fields = [
            'setting_functional_domain_code', 'setting_functional_domain_name',
            'setting_functionality_code', 'setting_functionality_name', 'created_date'
        ]

    def validate(self, attrs):
        setting_values = attrs.get('setting_values', getattr(self.instance, 'setting_values', ''))
        default_value = attrs.get('default_value', getattr(self.instance, 'default_value', ''))
        allowed = [v.strip() for v in (setting_values or '').split('|') if v.strip()]
        if default_value and allowed and default_value not in allowed:
            raise serializers.ValidationError({'default_value': ["Default value must be one of the setting values"]})
        return attrs


class CompanySettingSerializer(serializers.ModelSerializer):
    """Company setting joined with its master data"""
    setting_description = serializers.CharField(source='master.setting_description', read_only=True)
    setting_values = serializers.CharField(source='master.setting_values', read_only=True)
    allowed_values = serializers.ListField(source='master.allowed_values', child=serializers.CharField(), read_only=True)
    default_value = serializers.CharField(source='master.default_value', read_only=True)
    special_value_set = serializers.CharField(source='master.special_value_set', read_only=True)
    setting_functionality_code = serializers.CharField(source='master.setting_functionality_code', read_only=True)
    setting_functionality_name = serializers.CharField(source='master.setting_functionality_name', read_only=True)
    setting_order_within_functionality = serializers.IntegerField(
        source='master.setting_order_within_functionality', read_only=True
    )
    setting_shows_in_level = serializers.IntegerField(source='master.setting_shows_in_level', read_only=True)
    cant_be_true_if_the_following_is_false = serializers.CharField(
        source='master.cant_be_true_if_the_following_is_false', read_only=True
    )
    setting_once_enabled_cannot_be_disabled = serializers.BooleanField(
        source='master.setting_once_enabled_cannot_be_disabled', read_only=True
    )
    article_code = serializers.CharField(source='master.article_code', read_only=True)

    class Meta:
        model = CompanySetting
        fields = [
            'id', 'master', 'setting_code', 'setting_name', 'setting_value', 'company',
            'setting_description', 'setting_values', 'allowed_values', 'default_value', 'special_value_set',
            'setting_functionality_code', 'setting_functionality_name', 'setting_order_within_functionality',
            'setting_shows_in_level', 'cant_be_true_if_the_following_is_false',
            'setting_once_enabled_cannot_be_disabled', 'article_code',
            'created_date', 'last_updated_date', 'last_updated_by'
        ]
        read_only_fields = [
            'master', 'setting_code', 'setting_name', 'setting_value', 'company',
            'created_date', 'last_updated_date', 'last_updated_by'
        ]
