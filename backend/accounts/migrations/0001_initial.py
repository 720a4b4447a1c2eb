# Generated manually for the initial schema

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('core', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Account',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(blank=True, max_length=100)),
                ('last_name', models.CharField(blank=True, max_length=100)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('mobile_phone', models.CharField(blank=True, max_length=50)),
                ('is_person_account', models.BooleanField(default=False)),
                ('is_self_employed', models.BooleanField(default=False)),
                ('is_legal_entity', models.BooleanField(default=False)),
                ('is_shipping_address', models.BooleanField(default=False)),
                ('is_company_contact', models.BooleanField(default=False)),
                ('name', models.CharField(max_length=255)),
                ('company_official_name', models.CharField(blank=True, max_length=255)),
                ('company_registration_id', models.CharField(blank=True, max_length=100)),
                ('tax_id', models.CharField(blank=True, max_length=100)),
                ('address', models.TextField(blank=True)),
                ('address_street_address', models.CharField(blank=True, max_length=255)),
                ('address_city', models.CharField(blank=True, max_length=100)),
                ('address_state_province', models.CharField(blank=True, max_length=100)),
                ('address_zip_code', models.CharField(blank=True, max_length=20)),
                ('address_country', models.CharField(blank=True, max_length=100)),
                ('industry', models.CharField(blank=True, max_length=100)),
                ('custom_fields', models.JSONField(blank=True, default=dict)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accounts', to='core.company')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='owned_accounts', to=settings.AUTH_USER_MODEL)),
                ('parent_account', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='child_accounts', to='accounts.account')),
            ],
            options={
                'db_table': 'accounts',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['company', 'name'], name='accounts_company_name_idx')],
            },
        ),
    ]
