# Generated manually for the initial schema

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        ('accounts', '0001_initial'),
        ('products', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Asset',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(blank=True, max_length=255)),
                ('description', models.TextField(blank=True)),
                ('quantity', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('serial_number', models.CharField(max_length=255)),
                ('installation_date', models.DateField(blank=True, null=True)),
                ('location_street_address', models.CharField(blank=True, max_length=255)),
                ('location_city', models.CharField(blank=True, max_length=100)),
                ('location_state_province', models.CharField(blank=True, max_length=100)),
                ('location_zip_code', models.CharField(blank=True, max_length=20)),
                ('location_country', models.CharField(blank=True, max_length=100)),
                ('install_status', models.CharField(choices=[('Planned', 'Planned'), ('Installed', 'Installed'), ('Decommissioned', 'Decommissioned')], default='Planned', max_length=20)),
                ('custom_fields', models.JSONField(blank=True, default=dict)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='assets', to='accounts.account')),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assets', to='core.company')),
                ('product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='assets', to='products.product')),
            ],
            options={
                'db_table': 'assets',
                'ordering': ['name'],
            },
        ),
    ]
