from rest_framework import serializers
from .models import Asset


class AssetSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True, default=None)
    account_name = serializers.CharField(source='account.name', read_only=True, default=None)

    class Meta:
        model = Asset
        fields = [
            'id', 'name', 'description', 'quantity', 'serial_number', 'installation_date',
            'product', 'product_name', 'account', 'account_name',
            'location_street_address', 'location_city', 'location_state_province',
            'location_zip_code', 'location_country', 'install_status',
            'company', 'custom_fields', 'created_date'
        ]
        read_only_fields = ['company', 'created_date']

    def validate_serial_number(self, value):
        if not value or not value.strip():
            raise serializers.ValidationError("Serial number is required")
        return value.strip()

    def validate_quantity(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Quantity cannot be negative")
        return value

    def _check_company(self, value, message):
        company = self.context.get('company')
        if value is not None and company is not None and value.company_id != company.pk:
            raise serializers.ValidationError(message)
        return value

    def validate_product(self, value):
        return self._check_company(value, "Product not found")

    def validate_account(self, value):
        return self._check_company(value, "Account not found")
