"""Company role hierarchy and company settings rules"""
import logging

from django.db import transaction
from .models import CompanyRole, CompanySetting, CompanySettingsMaster

logger = logging.getLogger(__name__)

TRUE = 'TRUE'


class SettingChangeRefused(Exception):
    pass


def creates_cycle(role, parent):
    """True when making ``parent`` the parent of ``role`` closes a loop"""
    if role is None or role.pk is None or parent is None:
        return False
    if parent.pk == role.pk:
        return True
    return any(ancestor.pk == role.pk for ancestor in parent.ancestors())


def role_tree(company_id):
    """Nested role hierarchy of a company, roots first, children sorted by name"""
    roles = list(CompanyRole.objects.filter(company_id=company_id).order_by('name'))
    nodes = {role.pk: {'id': role.pk, 'name': role.name, 'parent_company_role': role.parent_company_role_id, 'children': []}
             for role in roles}
    roots = []
    for role in roles:
        node = nodes[role.pk]
        parent = nodes.get(role.parent_company_role_id)
        if parent is None:
            roots.append(node)
        else:
            parent['children'].append(node)
    return roots


def initialize_company_settings(company):
    """Create the missing settings of a company from the masters' defaults"""
    existing = set(CompanySetting.objects.filter(company=company).values_list('master_id', flat=True))
    missing = [
        CompanySetting(
            company=company, master=master, setting_code=master.setting_code,
            setting_name=master.setting_name, setting_value=master.default_value,
        )
        for master in CompanySettingsMaster.objects.exclude(pk__in=existing)
    ]
    CompanySetting.objects.bulk_create(missing)
    if missing:
        logger.info("Created %s settings for company %s", len(missing), company.pk)
    return len(missing)


def dependent_settings(setting):
    """Settings of the same company that require ``setting`` to be TRUE"""
    return CompanySetting.objects.filter(
        company_id=setting.company_id,
        master__cant_be_true_if_the_following_is_false=setting.setting_code,
    ).select_related('master')


def check_setting_change(setting, value):
    master = setting.master
    allowed = master.allowed_values
    if allowed and value not in allowed:
        raise SettingChangeRefused(f"Value must be one of: {', '.join(allowed)}")
    if master.setting_once_enabled_cannot_be_disabled and setting.setting_value == TRUE and value != TRUE:
        raise SettingChangeRefused("This setting cannot be disabled once enabled")
    prerequisite_code = master.cant_be_true_if_the_following_is_false
    if value == TRUE and prerequisite_code:
        prerequisite = CompanySetting.objects.filter(company_id=setting.company_id, setting_code=prerequisite_code).first()
        if prerequisite is None or prerequisite.setting_value != TRUE:
            raise SettingChangeRefused(f"Cannot be TRUE while {prerequisite_code} is FALSE")


@transaction.atomic
def change_setting(setting, value, user=None):
    """Validate and store a new setting value; returns the previous value"""
    check_setting_change(setting, value)
    previous = setting.setting_value
    setting.setting_value = value
    setting.last_updated_by = user
    setting.save(update_fields=['setting_value', 'last_updated_by', 'last_updated_date'])
    return previous
