from rest_framework import serializers
from .models import Account


class AccountSerializer(serializers.ModelSerializer):
    owner_name = serializers.SerializerMethodField()
    parent_account_name = serializers.CharField(source='parent_account.name', read_only=True, default=None)

    class Meta:
        model = Account
        fields = [
            'id', 'name', 'first_name', 'last_name', 'email', 'mobile_phone',
            'is_person_account', 'is_self_employed', 'is_legal_entity', 'is_shipping_address', 'is_company_contact',
            'company_official_name', 'company_registration_id', 'tax_id',
            'address', 'address_street_address', 'address_city', 'address_state_province',
            'address_zip_code', 'address_country', 'industry',
            'owner', 'owner_name', 'parent_account', 'parent_account_name',
            'company', 'custom_fields', 'created_date'
        ]
        read_only_fields = ['company', 'created_date']

    def get_owner_name(self, obj):
        owner = obj.owner
        return owner.get_full_name() or owner.username

    def validate_custom_fields(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Custom fields must be an object")
        return value

    def validate_parent_account(self, value):
        if value is None:
            return value
        company = self.context.get('company')
        if company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("Parent account not found")
        if self.instance is not None:
            # Walk up from the new parent; reaching this account means a cycle
            ancestor = value
            while ancestor is not None:
                if ancestor.pk == self.instance.pk:
                    raise serializers.ValidationError("An account cannot be its own ancestor")
                ancestor = ancestor.parent_account
        return value
