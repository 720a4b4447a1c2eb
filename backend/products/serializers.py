from rest_framework import serializers
from .models import UnitOfMeasure, Product


class UnitOfMeasureSerializer(serializers.ModelSerializer):
    class Meta:
        model = UnitOfMeasure
        fields = ['id', 'type', 'uom_name', 'base_to_type', 'company', 'created_date']
        read_only_fields = ['company', 'created_date']


class ProductSerializer(serializers.ModelSerializer):
    sales_uom_name = serializers.CharField(source='sales_uom.uom_name', read_only=True, default=None)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sales_category', 'sales_uom', 'sales_uom_name', 'sales_unit_price',
            'sales_unit_price_currency', 'vat_percent', 'company', 'custom_fields', 'created_date'
        ]
        read_only_fields = ['company', 'created_date']

    def validate_sales_uom(self, value):
        company = self.context.get('company')
        if value is not None and company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("Unit of measure not found")
        return value

    def validate_sales_unit_price(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Sales unit price cannot be negative")
        return value

    def validate_vat_percent(self, value):
        if value is not None and (value < 0 or value > 100):
            raise serializers.ValidationError("VAT percent must be between 0 and 100")
        return value

    def validate_sales_unit_price_currency(self, value):
        return value.upper() if value else value
