"""Utility functions for company context and audit logging"""
import logging

from django.db import transaction
from .models import AuditLog, Company

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def get_company_context(request):
    """
    Return the id of the company the requesting user currently works in.

    Falls back to the user's own company when no context has been set yet.
    Returns None for anonymous users and users without any company.
    """
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None
    if user.company_context_id:
        return user.company_context_id
    return user.company_id


def get_company(request):
    """Company instance for the request's company context, or None"""
    company_id = get_company_context(request)
    if not company_id:
        return None
    return Company.objects.filter(pk=company_id).first()


def set_company_context(user, company=None):
    """Point the user's company context at ``company`` (default: own company)"""
    company = company or user.company
    user.company_context = company
    user.save(update_fields=['company_context', 'updated_at'])
    return company


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, company_id=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, setting_change, ...)
        model_name: Name of the model or object code being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object
        company_id: Company the record belongs to (defaults to the request's context)
    """
    if not action or not model_name or not object_id:
        logger.warning(
            "Audit log creation skipped: missing required fields (action=%s, model_name=%s, object_id=%s)",
            action, model_name, object_id,
        )
        return None

    audit_user = user
    if audit_user is None and request is not None and hasattr(request, 'user'):
        audit_user = request.user
    if company_id is None and request is not None:
        company_id = get_company_context(request)

    try:
        # Own savepoint, so a failed insert leaves the caller's transaction usable
        with transaction.atomic():
            return AuditLog.objects.create(
                user=audit_user if audit_user and audit_user.is_authenticated else None,
                company_id=company_id,
                action=action,
                model_name=model_name,
                object_id=str(object_id),
                object_name=(object_name or '')[:255] or None,
                changes=changes or {},
                ip_address=get_client_ip(request) if request else None,
            )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None
