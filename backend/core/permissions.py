from rest_framework.permissions import BasePermission


def is_company_admin(user):
    """Company admins manage setup data of their own company; global admins always qualify"""
    if not user or not user.is_authenticated:
        return False
    return bool(user.is_company_admin or user.is_global_admin or user.is_superuser)


def is_global_admin(user):
    if not user or not user.is_authenticated:
        return False
    return bool(user.is_global_admin or user.is_superuser)


class IsCompanyAdmin(BasePermission):
    message = 'Access denied. Company admin role required.'

    def has_permission(self, request, view):
        return is_company_admin(request.user)


class IsGlobalAdmin(BasePermission):
    message = 'Access denied. Global admin role required.'

    def has_permission(self, request, view):
        return is_global_admin(request.user)
