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
            name='FieldDefinition',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('object_code', models.CharField(max_length=100)),
                ('api_code', models.CharField(max_length=100)),
                ('label', models.CharField(max_length=255)),
                ('type', models.CharField(choices=[('TextField', 'Text'), ('NumberField', 'Number'), ('CheckboxField', 'Checkbox'), ('DateTimeField', 'Date/Time'), ('DropDownListField', 'Dropdown List'), ('LookupField', 'Lookup'), ('AddressField', 'Address'), ('PhoneField', 'Phone')], max_length=50)),
                ('subtype', models.CharField(blank=True, max_length=50)),
                ('field_type', models.CharField(blank=True, help_text='Presentation variant, e.g. multiSelect', max_length=50)),
                ('help_text', models.TextField(blank=True)),
                ('placeholder', models.CharField(blank=True, max_length=255)),
                ('required', models.BooleanField(default=False)),
                ('max_length', models.PositiveIntegerField(blank=True, null=True)),
                ('min_value', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('max_value', models.DecimalField(blank=True, decimal_places=5, max_digits=17, null=True)),
                ('decimal_places', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('percentage_display', models.BooleanField(default=False)),
                ('allow_search', models.BooleanField(default=False)),
                ('copyable', models.BooleanField(default=False)),
                ('default_value', models.JSONField(blank=True, null=True)),
                ('value_set', models.JSONField(blank=True, default=list, help_text="Dropdown options: [{'value': ..., 'label': ...}]")),
                ('lookup_object_code', models.CharField(blank=True, max_length=100)),
                ('sort_order', models.IntegerField(default=0)),
                ('is_custom', models.BooleanField(default=False)),
                ('extra', models.JSONField(blank=True, default=dict, help_text='Remaining presentation metadata')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='field_definitions', to='core.company')),
            ],
            options={
                'db_table': 'field_definitions',
                'ordering': ['object_code', 'sort_order', 'api_code'],
                'indexes': [models.Index(fields=['object_code'], name='field_defs_object_idx')],
                'constraints': [
                    models.UniqueConstraint(fields=('company', 'object_code', 'api_code'), name='uniq_company_field_definition'),
                    models.UniqueConstraint(condition=models.Q(('company__isnull', True)), fields=('object_code', 'api_code'), name='uniq_standard_field_definition'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ObjectLayout',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('object_code', models.CharField(max_length=100)),
                ('view_type', models.CharField(choices=[('table', 'Table'), ('detail', 'Detail')], max_length=20)),
                ('name', models.CharField(max_length=255)),
                ('definition', models.JSONField(default=dict, help_text="{'columns': [...]} for tables, {'sections': [{'label', 'fields'}]} for details")),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('company', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='object_layouts', to='core.company')),
            ],
            options={
                'db_table': 'object_layouts',
                'ordering': ['object_code', 'view_type'],
                'constraints': [
                    models.UniqueConstraint(fields=('company', 'object_code', 'view_type'), name='uniq_company_layout'),
                    models.UniqueConstraint(condition=models.Q(('company__isnull', True)), fields=('object_code', 'view_type'), name='uniq_default_layout'),
                ],
            },
        ),
    ]
