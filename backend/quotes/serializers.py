from rest_framework import serializers
from .models import Quote, QuoteLine
from .pricing import BASIS_AMOUNT, BASIS_PERCENT

CUSTOMER_ADDRESS_PARTS = ('street_address', 'city', 'state_province', 'zip_code', 'country')
PRODUCT_DEFAULTS = (
    ('name', 'name'),
    ('product_unit_price', 'sales_unit_price'),
    ('unit_price_currency', 'sales_unit_price_currency'),
    ('vat_percent', 'vat_percent'),
)
DISCOUNT_PAIRS = (
    ('unit_price_discount_percent', 'unit_price_discount_amount', 'unit_price_discount_basis'),
    ('discount_percent_on_subtotal', 'discount_amount_on_subtotal', 'subtotal_discount_basis'),
)


class QuoteLineSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True, default=None)

    class Meta:
        model = QuoteLine
        fields = [
            'id', 'quote', 'quote_name', 'product', 'product_name', 'name',
            'product_unit_price', 'unit_price_currency', 'product_unit_price_override', 'quote_unit_price',
            'unit_price_discount_percent', 'unit_price_discount_amount', 'unit_price_discount_basis', 'final_unit_price',
            'sales_uom', 'quoted_quantity', 'subtotal_before_row_discounts',
            'discount_percent_on_subtotal', 'discount_amount_on_subtotal', 'subtotal_discount_basis', 'final_subtotal',
            'vat_percent', 'vat_unit_amount', 'vat_on_subtotal', 'gross_subtotal', 'created_date'
        ]
        read_only_fields = [
            'quote', 'quote_name', 'quote_unit_price', 'unit_price_discount_basis', 'final_unit_price',
            'subtotal_before_row_discounts', 'subtotal_discount_basis',
            'final_subtotal', 'vat_unit_amount', 'vat_on_subtotal', 'gross_subtotal', 'created_date'
        ]

    def validate_product(self, value):
        company = self.context.get('company')
        if value is not None and company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("Product not found")
        return value

    def validate_quoted_quantity(self, value):
        if value is not None and value < 0:
            raise serializers.ValidationError("Quoted quantity cannot be negative")
        return value

    def validate(self, attrs):
        # The side of each discount the caller sent drives it from now on;
        # an untouched pair keeps its stored basis
        for percent_field, amount_field, basis_field in DISCOUNT_PAIRS:
            if attrs.get(amount_field) is not None:
                attrs[basis_field] = BASIS_AMOUNT
            elif percent_field in attrs:
                attrs[amount_field] = None
                attrs[basis_field] = BASIS_PERCENT
            elif amount_field in attrs:
                attrs[basis_field] = BASIS_AMOUNT

        product = attrs.get('product')
        if product is None:
            return attrs
        # Empty line values are filled from the chosen product
        for line_field, product_field in PRODUCT_DEFAULTS:
            current = attrs.get(line_field, getattr(self.instance, line_field, None))
            if current in (None, ''):
                attrs[line_field] = getattr(product, product_field)
        if not attrs.get('sales_uom', getattr(self.instance, 'sales_uom', '')) and product.sales_uom_id:
            attrs['sales_uom'] = product.sales_uom.uom_name
        return attrs

    def create(self, validated_data):
        quote = validated_data['quote']
        validated_data.setdefault('quote_name', quote.name)
        return super().create(validated_data)


class QuoteSerializer(serializers.ModelSerializer):
    customer_account_name = serializers.CharField(source='customer.name', read_only=True, default=None)
    line_count = serializers.SerializerMethodField()

    class Meta:
        model = Quote
        fields = [
            'id', 'name', 'customer', 'customer_account_name', 'customer_name', 'customer_address',
            'customer_address_street_address', 'customer_address_city', 'customer_address_state_province',
            'customer_address_zip_code', 'customer_address_country',
            'seller_name', 'seller_address', 'seller_bank_account', 'seller_user', 'seller_email', 'seller_phone',
            'quote_expiration_date', 'created_by', 'net_grand_total', 'gross_grand_total', 'line_count',
            'company', 'custom_fields', 'created_date'
        ]
        read_only_fields = ['created_by', 'net_grand_total', 'gross_grand_total', 'company', 'created_date']

    def get_line_count(self, obj):
        return obj.lines.count()

    def validate_customer(self, value):
        company = self.context.get('company')
        if value is not None and company is not None and value.company_id != company.pk:
            raise serializers.ValidationError("Customer not found")
        return value

    def validate_custom_fields(self, value):
        if not isinstance(value, dict):
            raise serializers.ValidationError("Custom fields must be an object")
        return value

    def create(self, validated_data):
        customer = validated_data.get('customer')
        if customer is not None:
            validated_data.setdefault('customer_name', customer.name)
            validated_data.setdefault('customer_address', customer.address)
            for part in CUSTOMER_ADDRESS_PARTS:
                validated_data.setdefault(f'customer_address_{part}', getattr(customer, f'address_{part}'))

        company = validated_data.get('company') or self.context.get('company')
        if company is not None:
            validated_data.setdefault('seller_name', company.company_official_name)
            validated_data.setdefault('seller_address', company.address)
            validated_data.setdefault('seller_bank_account', company.bank_account_number)

        user = self.context.get('user')
        if user is not None and user.is_authenticated:
            validated_data.setdefault('seller_user', user)
            validated_data.setdefault('seller_email', user.email)
            validated_data.setdefault('seller_phone', user.phone or '')
            validated_data['created_by'] = user
        return super().create(validated_data)
