from django.contrib.auth.models import AbstractUser
from django.db import models


class Company(models.Model):
    """Tenant company; every business record belongs to exactly one"""
    company_official_name = models.CharField(max_length=255)
    company_alias = models.CharField(max_length=255, blank=True)
    company_registration_id = models.CharField(max_length=100, blank=True, null=True, unique=True)
    bank_account_number = models.CharField(max_length=100, blank=True)
    address = models.TextField(blank=True)
    tax_residency_country = models.CharField(max_length=100, blank=True)
    logo_url = models.URLField(blank=True)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.company_alias or self.company_official_name

    class Meta:
        db_table = 'companies'
        verbose_name_plural = 'companies'
        ordering = ['company_official_name']


class User(AbstractUser):
    """Extended user model with company membership and company context"""
    phone = models.CharField(max_length=20, blank=True, null=True)
    company = models.ForeignKey(Company, on_delete=models.SET_NULL, null=True, blank=True, related_name='users')
    # Company whose data the user currently works on; set at login
    company_context = models.ForeignKey(Company, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    is_company_admin = models.BooleanField(default=False)
    is_global_admin = models.BooleanField(default=False)
    preferred_language = models.CharField(max_length=20, blank=True)
    timezone = models.CharField(max_length=64, blank=True, help_text="IANA timezone, e.g. Europe/London")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'users'


class AuditLog(models.Model):
    """Audit log for record changes"""
    ACTION_CHOICES = [
        ('create', 'Create'),
        ('update', 'Update'),
        ('delete', 'Delete'),
        ('view', 'View'),
        ('login', 'Login'),
        ('context_switch', 'Company Context Switch'),
        ('setting_change', 'Company Setting Changed'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, related_name='audit_logs')
    company = models.ForeignKey(Company, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs')
    action = models.CharField(max_length=50, choices=ACTION_CHOICES)
    model_name = models.CharField(max_length=100)
    object_id = models.CharField(max_length=100)
    object_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., account name, quote name)")
    changes = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='audit_logs_created_6f1c2a_idx'),
            models.Index(fields=['action'], name='audit_logs_action_9b3d4e_idx'),
            models.Index(fields=['model_name'], name='audit_logs_model_n_2a7f8c_idx'),
        ]
