# Generated manually for the initial schema

from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('accounts', '0001_initial'),
        ('products', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Quote',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('customer_name', models.CharField(blank=True, max_length=255)),
                ('customer_address', models.TextField(blank=True)),
                ('customer_address_street_address', models.CharField(blank=True, max_length=255)),
                ('customer_address_city', models.CharField(blank=True, max_length=100)),
                ('customer_address_state_province', models.CharField(blank=True, max_length=100)),
                ('customer_address_zip_code', models.CharField(blank=True, max_length=20)),
                ('customer_address_country', models.CharField(blank=True, max_length=100)),
                ('seller_name', models.CharField(blank=True, max_length=255)),
                ('seller_address', models.TextField(blank=True)),
                ('seller_bank_account', models.CharField(blank=True, max_length=100)),
                ('seller_email', models.EmailField(blank=True, max_length=254)),
                ('seller_phone', models.CharField(blank=True, max_length=50)),
                ('quote_expiration_date', models.DateField(blank=True, null=True)),
                ('net_grand_total', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('gross_grand_total', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('custom_fields', models.JSONField(blank=True, default=dict)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quotes', to='core.company')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_quotes', to=settings.AUTH_USER_MODEL)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='quotes', to='accounts.account')),
                ('seller_user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sold_quotes', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'quotes',
                'ordering': ['-created_date'],
            },
        ),
        migrations.CreateModel(
            name='QuoteLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quote_name', models.CharField(blank=True, max_length=255)),
                ('name', models.CharField(blank=True, max_length=255)),
                ('product_unit_price', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('unit_price_currency', models.CharField(blank=True, max_length=3)),
                ('product_unit_price_override', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('quote_unit_price', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('unit_price_discount_percent', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('unit_price_discount_amount', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('final_unit_price', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('sales_uom', models.CharField(blank=True, max_length=100)),
                ('quoted_quantity', models.DecimalField(decimal_places=5, default=Decimal('1'), max_digits=17)),
                ('subtotal_before_row_discounts', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('discount_percent_on_subtotal', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('discount_amount_on_subtotal', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('final_subtotal', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('vat_percent', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('vat_unit_amount', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('vat_on_subtotal', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('gross_subtotal', models.DecimalField(decimal_places=5, default=Decimal('0'), max_digits=17)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='quote_lines', to='products.product')),
                ('quote', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='quotes.quote')),
            ],
            options={
                'db_table': 'quote_lines',
                'ordering': ['id'],
            },
        ),
    ]
