# Generated manually for the initial schema

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='UnitOfMeasure',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(help_text='Dimension, e.g. Quantity, Time, Weight', max_length=100)),
                ('uom_name', models.CharField(max_length=100)),
                ('base_to_type', models.BooleanField(default=False, help_text='Base unit of its type')),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='unit_of_measures', to='core.company')),
            ],
            options={
                'db_table': 'unit_of_measures',
                'ordering': ['type', 'uom_name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sales_category', models.CharField(blank=True, max_length=100)),
                ('name', models.CharField(max_length=255)),
                ('sales_unit_price', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('sales_unit_price_currency', models.CharField(blank=True, max_length=3)),
                ('vat_percent', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('custom_fields', models.JSONField(blank=True, default=dict)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='core.company')),
                ('sales_uom', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='products', to='products.unitofmeasure')),
            ],
            options={
                'db_table': 'products',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['company', 'name'], name='products_company_name_idx')],
            },
        ),
    ]
