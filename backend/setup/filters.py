import django_filters
from .models import UserRoleAssignment


class UserRoleAssignmentFilter(django_filters.FilterSet):
    """Role assignment filters: by company role and by user"""
    role = django_filters.NumberFilter(field_name='company_role_id')
    user = django_filters.NumberFilter(field_name='user_id')

    class Meta:
        model = UserRoleAssignment
        fields = ['role', 'user']
