from django.conf import settings
from django.db import models
from backend.core.models import Company

SETTING_VALUE_SEPARATOR = '|'


class CompanyRole(models.Model):
    """Node of a company's role hierarchy"""
    name = models.CharField(max_length=255)
    parent_company_role = models.ForeignKey('self', on_delete=models.PROTECT, null=True, blank=True, related_name='child_roles')
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='company_roles')
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    def ancestors(self):
        role = self.parent_company_role
        while role is not None:
            yield role
            role = role.parent_company_role

    class Meta:
        db_table = 'company_roles'
        ordering = ['name']


class UserRoleAssignment(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='role_assignments')
    company_role = models.ForeignKey(CompanyRole, on_delete=models.CASCADE, related_name='assignments')
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user} - {self.company_role}"

    class Meta:
        db_table = 'user_role_assignments'
        ordering = ['company_role__name', 'user__username']
        constraints = [
            models.UniqueConstraint(fields=['user', 'company_role'], name='uniq_user_role'),
        ]


class Release(models.Model):
    STATUS_CHOICES = [
        ('Planned', 'Planned'),
        ('In Progress', 'In Progress'),
        ('Completed', 'Completed'),
        ('Dropped', 'Dropped'),
    ]

    release_name = models.CharField(max_length=255)
    release_description = models.TextField(blank=True)
    order = models.PositiveIntegerField()
    commits = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Planned')
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='releases')
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.release_name

    class Meta:
        db_table = 'releases'
        ordering = ['order']


class Translation(models.Model):
    """UI label text in one language"""
    label_code = models.CharField(max_length=255)
    label_content = models.TextField()
    language_code = models.CharField(max_length=20)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.label_code} ({self.language_code})"

    class Meta:
        db_table = 'translations'
        ordering = ['label_code']
        constraints = [
            models.UniqueConstraint(fields=['label_code', 'language_code'], name='uniq_translation_label_language'),
        ]


class CompanySettingMasterDomain(models.Model):
    code = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'company_setting_master_domains'
        ordering = ['code']


class CompanySettingMasterFunctionality(models.Model):
    code = models.CharField(max_length=100, unique=True)
    name = models.CharField(max_length=255)
    domain = models.ForeignKey(CompanySettingMasterDomain, on_delete=models.PROTECT, related_name='functionalities')
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'company_setting_master_functionalities'
        verbose_name_plural = 'company setting master functionalities'
        ordering = ['code']


class CompanySettingsMaster(models.Model):
    """
    Definition of one company setting.

    ``setting_values`` lists the allowed values separated by ``|``
    (e.g. ``TRUE|FALSE``). ``cant_be_true_if_the_following_is_false`` holds
    the setting code of a prerequisite setting.
    """
    functionality = models.ForeignKey(
        CompanySettingMasterFunctionality, on_delete=models.PROTECT, null=True, blank=True, related_name='settings'
    )
    setting_functional_domain_code = models.CharField(max_length=100, blank=True)
    setting_functional_domain_name = models.CharField(max_length=255, blank=True)
    setting_functionality_code = models.CharField(max_length=100, blank=True)
    setting_functionality_name = models.CharField(max_length=255, blank=True)
    setting_code = models.CharField(max_length=100, unique=True)
    setting_name = models.CharField(max_length=255)
    setting_description = models.TextField(blank=True)
    setting_values = models.CharField(max_length=255, blank=True)
    default_value = models.CharField(max_length=255, blank=True)
    special_value_set = models.CharField(max_length=255, blank=True)
    cant_be_true_if_the_following_is_false = models.CharField(max_length=100, blank=True)
    article_code = models.CharField(max_length=100, blank=True)
    setting_order_within_functionality = models.IntegerField(default=0)
    setting_shows_in_level = models.IntegerField(default=1)
    setting_once_enabled_cannot_be_disabled = models.BooleanField(default=False)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.setting_code

    @property
    def allowed_values(self):
        return [v.strip() for v in self.setting_values.split(SETTING_VALUE_SEPARATOR) if v.strip()]

    def save(self, *args, **kwargs):
        # Domain and functionality codes are denormalised for lookups by domain
        if self.functionality_id:
            functionality = self.functionality
            self.setting_functionality_code = functionality.code
            self.setting_functionality_name = functionality.name
            self.setting_functional_domain_code = functionality.domain.code
            self.setting_functional_domain_name = functionality.domain.name
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'company_settings_master'
        ordering = ['setting_functional_domain_code', 'setting_functionality_code', 'setting_order_within_functionality']


class CompanySetting(models.Model):
    master = models.ForeignKey(CompanySettingsMaster, on_delete=models.PROTECT, related_name='company_settings')
    setting_code = models.CharField(max_length=100, blank=True)
    setting_name = models.CharField(max_length=255, blank=True)
    setting_value = models.CharField(max_length=255, blank=True)
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='settings')
    created_date = models.DateTimeField(auto_now_add=True)
    last_updated_date = models.DateTimeField(auto_now=True)
    last_updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )

    def __str__(self):
        return f"{self.setting_code}={self.setting_value}"

    class Meta:
        db_table = 'company_settings'
        constraints = [
            models.UniqueConstraint(fields=['company', 'master'], name='uniq_company_setting'),
        ]
