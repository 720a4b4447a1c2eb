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
            name='CompanyRole',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='company_roles', to='core.company')),
                ('parent_company_role', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='child_roles', to='setup.companyrole')),
            ],
            options={
                'db_table': 'company_roles',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='UserRoleAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company_role', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='setup.companyrole')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='role_assignments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_role_assignments',
                'ordering': ['company_role__name', 'user__username'],
                'constraints': [models.UniqueConstraint(fields=('user', 'company_role'), name='uniq_user_role')],
            },
        ),
        migrations.CreateModel(
            name='Release',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('release_name', models.CharField(max_length=255)),
                ('release_description', models.TextField(blank=True)),
                ('order', models.PositiveIntegerField()),
                ('commits', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('Planned', 'Planned'), ('In Progress', 'In Progress'), ('Completed', 'Completed'), ('Dropped', 'Dropped')], default='Planned', max_length=20)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='releases', to='core.company')),
            ],
            options={
                'db_table': 'releases',
                'ordering': ['order'],
            },
        ),
        migrations.CreateModel(
            name='Translation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('label_code', models.CharField(max_length=255)),
                ('label_content', models.TextField()),
                ('language_code', models.CharField(max_length=20)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'translations',
                'ordering': ['label_code'],
                'constraints': [models.UniqueConstraint(fields=('label_code', 'language_code'), name='uniq_translation_label_language')],
            },
        ),
        migrations.CreateModel(
            name='CompanySettingMasterDomain',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'company_setting_master_domains',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='CompanySettingMasterFunctionality',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('code', models.CharField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('domain', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='functionalities', to='setup.companysettingmasterdomain')),
            ],
            options={
                'db_table': 'company_setting_master_functionalities',
                'verbose_name_plural': 'company setting master functionalities',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='CompanySettingsMaster',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('setting_functional_domain_code', models.CharField(blank=True, max_length=100)),
                ('setting_functional_domain_name', models.CharField(blank=True, max_length=255)),
                ('setting_functionality_code', models.CharField(blank=True, max_length=100)),
                ('setting_functionality_name', models.CharField(blank=True, max_length=255)),
                ('setting_code', models.CharField(max_length=100, unique=True)),
                ('setting_name', models.CharField(max_length=255)),
                ('setting_description', models.TextField(blank=True)),
                ('setting_values', models.CharField(blank=True, max_length=255)),
                ('default_value', models.CharField(blank=True, max_length=255)),
                ('special_value_set', models.CharField(blank=True, max_length=255)),
                ('cant_be_true_if_the_following_is_false', models.CharField(blank=True, max_length=100)),
                ('article_code', models.CharField(blank=True, max_length=100)),
                ('setting_order_within_functionality', models.IntegerField(default=0)),
                ('setting_shows_in_level', models.IntegerField(default=1)),
                ('setting_once_enabled_cannot_be_disabled', models.BooleanField(default=False)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('functionality', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='settings', to='setup.companysettingmasterfunctionality')),
            ],
            options={
                'db_table': 'company_settings_master',
                'ordering': ['setting_functional_domain_code', 'setting_functionality_code', 'setting_order_within_functionality'],
            },
        ),
        migrations.CreateModel(
            name='CompanySetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('setting_code', models.CharField(blank=True, max_length=100)),
                ('setting_name', models.CharField(blank=True, max_length=255)),
                ('setting_value', models.CharField(blank=True, max_length=255)),
                ('created_date', models.DateTimeField(auto_now_add=True)),
                ('last_updated_date', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='settings', to='core.company')),
                ('last_updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('master', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='company_settings', to='setup.companysettingsmaster')),
            ],
            options={
                'db_table': 'company_settings',
                'constraints': [models.UniqueConstraint(fields=('company', 'master'), name='uniq_company_setting')],
            },
        ),
    ]
