from django.db import models
from django.db.models import Q
from backend.core.models import Company


class FieldDefinition(models.Model):
    """
    Metadata for one field of a business object.

    Rows without a company are the standard definitions shared by every
    company; a company row with the same api_code overrides the standard one.
    """
    FIELD_TYPE_CHOICES = [
        ('TextField', 'Text'),
        ('NumberField', 'Number'),
        ('CheckboxField', 'Checkbox'),
        ('DateTimeField', 'Date/Time'),
        ('DropDownListField', 'Dropdown List'),
        ('LookupField', 'Lookup'),
        ('AddressField', 'Address'),
        ('PhoneField', 'Phone'),
    ]

    company = models.ForeignKey(Company, on_delete=models.CASCADE, null=True, blank=True, related_name='field_definitions')
    object_code = models.CharField(max_length=100)
    api_code = models.CharField(max_length=100)
    label = models.CharField(max_length=255)
    type = models.CharField(max_length=50, choices=FIELD_TYPE_CHOICES)
    subtype = models.CharField(max_length=50, blank=True)
    field_type = models.CharField(max_length=50, blank=True, help_text="Presentation variant, e.g. multiSelect")
    help_text = models.TextField(blank=True)
    placeholder = models.CharField(max_length=255, blank=True)
    required = models.BooleanField(default=False)
    max_length = models.PositiveIntegerField(null=True, blank=True)
    min_value = models.DecimalField(max_digits=17, decimal_places=5, null=True, blank=True)
    max_value = models.DecimalField(max_digits=17, decimal_places=5, null=True, blank=True)
    decimal_places = models.PositiveSmallIntegerField(null=True, blank=True)
    percentage_display = models.BooleanField(default=False)
    allow_search = models.BooleanField(default=False)
    copyable = models.BooleanField(default=False)
    default_value = models.JSONField(null=True, blank=True)
    value_set = models.JSONField(default=list, blank=True, help_text="Dropdown options: [{'value': ..., 'label': ...}]")
    lookup_object_code = models.CharField(max_length=100, blank=True)
    sort_order = models.IntegerField(default=0)
    is_custom = models.BooleanField(default=False)
    extra = models.JSONField(default=dict, blank=True, help_text="Remaining presentation metadata")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.object_code}.{self.api_code}"

    @property
    def is_multi_select(self):
        return self.subtype == 'multiSelect' or self.field_type == 'multiSelect'

    class Meta:
        db_table = 'field_definitions'
        ordering = ['object_code', 'sort_order', 'api_code']
        constraints = [
            models.UniqueConstraint(fields=['company', 'object_code', 'api_code'], name='uniq_company_field_definition'),
            models.UniqueConstraint(
                fields=['object_code', 'api_code'], condition=Q(company__isnull=True),
                name='uniq_standard_field_definition',
            ),
        ]
        indexes = [
            models.Index(fields=['object_code'], name='field_defs_object_idx'),
        ]


class ObjectLayout(models.Model):
    """Table or detail layout of an object; rows without a company are the defaults"""
    VIEW_TYPE_CHOICES = [
        ('table', 'Table'),
        ('detail', 'Detail'),
    ]

    company = models.ForeignKey(Company, on_delete=models.CASCADE, null=True, blank=True, related_name='object_layouts')
    object_code = models.CharField(max_length=100)
    view_type = models.CharField(max_length=20, choices=VIEW_TYPE_CHOICES)
    name = models.CharField(max_length=255)
    definition = models.JSONField(default=dict, help_text="{'columns': [...]} for tables, {'sections': [{'label', 'fields'}]} for details")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.object_code} {self.view_type} ({self.company or 'default'})"

    class Meta:
        db_table = 'object_layouts'
        ordering = ['object_code', 'view_type']
        constraints = [
            models.UniqueConstraint(fields=['company', 'object_code', 'view_type'], name='uniq_company_layout'),
            models.UniqueConstraint(
                fields=['object_code', 'view_type'], condition=Q(company__isnull=True),
                name='uniq_default_layout',
            ),
        ]
