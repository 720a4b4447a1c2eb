import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from backend.core.permissions import IsCompanyAdmin, IsGlobalAdmin, is_company_admin, is_global_admin
from backend.core.utils import get_company_context, get_company, create_audit_log
from .models import (
    CompanyRole, UserRoleAssignment, Release, Translation,
    CompanySettingMasterDomain, CompanySettingMasterFunctionality, CompanySettingsMaster, CompanySetting
)
from .serializers import (
    CompanyRoleSerializer, UserRoleAssignmentSerializer, ReleaseSerializer, TranslationSerializer,
    CompanySettingMasterDomainSerializer, CompanySettingMasterFunctionalitySerializer,
    CompanySettingsMasterSerializer, CompanySettingSerializer
)
from .filters import UserRoleAssignmentFilter
from .services import SettingChangeRefused, change_setting, dependent_settings, role_tree

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = {'message': IsCompanyAdmin.message}
CONTEXT_REQUIRED = {'message': 'Company context required'}


def invalid(serializer):
    return Response({'message': 'Invalid data', 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


# Company role views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def company_role_list_create(request):
    """List the company's roles or create one"""
    company = get_company(request)
    if request.method == 'GET':
        roles = CompanyRole.objects.filter(company=company).select_related('parent_company_role')
        return Response(CompanyRoleSerializer(roles, many=True).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if company is None:
        return Response(CONTEXT_REQUIRED, status=status.HTTP_400_BAD_REQUEST)
    serializer = CompanyRoleSerializer(data=request.data, context={'company': company})
    if not serializer.is_valid():
        return invalid(serializer)
    role = serializer.save(company=company)
    create_audit_log(request, action='create', model_name='company_roles', object_id=role.pk, object_name=role.name)
    return Response(CompanyRoleSerializer(role).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def company_role_tree(request):
    """Role hierarchy of the company as nested nodes"""
    return Response(role_tree(get_company_context(request)))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def company_role_detail(request, pk):
    company = get_company(request)
    role = CompanyRole.objects.filter(company=company, pk=pk).first()
    if role is None:
        return Response({'message': 'Company role not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(CompanyRoleSerializer(role).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = CompanyRoleSerializer(
            role, data=request.data, partial=request.method == 'PATCH', context={'company': company}
        )
        if not serializer.is_valid():
            return invalid(serializer)
        serializer.save()
        create_audit_log(request, action='update', model_name='company_roles', object_id=role.pk, object_name=role.name)
        return Response(serializer.data)

    # DELETE
    if role.child_roles.exists() or role.assignments.exists():
        return Response(
            {'message': 'Cannot delete company role with child roles or user assignments'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    create_audit_log(request, action='delete', model_name='company_roles', object_id=role.pk, object_name=role.name)
    role.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


# User role assignment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def user_role_assignment_list_create(request):
    """List role assignments (``?role=`` or ``?user=`` filters) or assign a role"""
    company = get_company(request)
    if request.method == 'GET':
        assignments = UserRoleAssignment.objects.filter(company_role__company=company).select_related('user', 'company_role')
        filterset = UserRoleAssignmentFilter(request.query_params, queryset=assignments)
        if not filterset.is_valid():
            return Response({'message': 'Invalid filters', 'errors': filterset.errors}, status=status.HTTP_400_BAD_REQUEST)
        return Response(UserRoleAssignmentSerializer(filterset.qs, many=True).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if company is None:
        return Response(CONTEXT_REQUIRED, status=status.HTTP_400_BAD_REQUEST)
    serializer = UserRoleAssignmentSerializer(data=request.data, context={'company': company})
    if not serializer.is_valid():
        return invalid(serializer)
    assignment = serializer.save()
    create_audit_log(
        request, action='create', model_name='user_role_assignments', object_id=assignment.pk,
        object_name=str(assignment),
    )
    return Response(UserRoleAssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def user_role_assignment_detail(request, pk):
    assignment = UserRoleAssignment.objects.filter(
        company_role__company_id=get_company_context(request), pk=pk
    ).select_related('user', 'company_role').first()
    if assignment is None:
        return Response({'message': 'User role assignment not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(UserRoleAssignmentSerializer(assignment).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    create_audit_log(
        request, action='delete', model_name='user_role_assignments', object_id=assignment.pk,
        object_name=str(assignment),
    )
    assignment.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


# Release views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def release_list_create(request):
    company = get_company(request)
    if request.method == 'GET':
        releases = Release.objects.filter(company=company)
        release_status = request.query_params.get('status')
        if release_status:
            releases = releases.filter(status=release_status)
        return Response(ReleaseSerializer(releases, many=True).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if company is None:
        return Response(CONTEXT_REQUIRED, status=status.HTTP_400_BAD_REQUEST)
    serializer = ReleaseSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid(serializer)
    release = serializer.save(company=company)
    create_audit_log(request, action='create', model_name='releases', object_id=release.pk, object_name=str(release))
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def release_detail(request, pk):
    release = Release.objects.filter(company_id=get_company_context(request), pk=pk).first()
    if release is None:
        return Response({'message': 'Release not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(ReleaseSerializer(release).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        serializer = ReleaseSerializer(release, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return invalid(serializer)
        serializer.save()
        create_audit_log(request, action='update', model_name='releases', object_id=release.pk, object_name=str(release))
        return Response(serializer.data)

    create_audit_log(request, action='delete', model_name='releases', object_id=release.pk, object_name=str(release))
    release.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


# Translation views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def translation_list_create(request):
    """Translations, optionally of one language (``?language=``); global admins add new ones"""
    if request.method == 'GET':
        translations = Translation.objects.all()
        language = request.query_params.get('language')
        if language:
            translations = translations.filter(language_code=language)
        return Response(TranslationSerializer(translations, many=True).data)

    if not is_global_admin(request.user):
        return Response({'message': IsGlobalAdmin.message}, status=status.HTTP_403_FORBIDDEN)
    serializer = TranslationSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid(serializer)
    serializer.save()
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def translation_detail(request, pk):
    translation = get_object_or_404(Translation, pk=pk)
    if request.method == 'GET':
        return Response(TranslationSerializer(translation).data)

    if not is_global_admin(request.user):
        return Response({'message': IsGlobalAdmin.message}, status=status.HTTP_403_FORBIDDEN)
    if request.method in ('PUT', 'PATCH'):
        serializer = TranslationSerializer(translation, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return invalid(serializer)
        serializer.save()
        return Response(serializer.data)
    translation.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


# Company setting master views (global admin)
def master_list_create(request, model, serializer_class):
    if request.method == 'GET':
        return Response(serializer_class(model.objects.all(), many=True).data)
    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return invalid(serializer)
    instance = serializer.save()
    logger.info("Created %s %s", model._meta.verbose_name, instance)
    return Response(serializer_class(instance).data, status=status.HTTP_201_CREATED)


def master_detail(request, instance, serializer_class, delete_refusal=None):
    if request.method == 'GET':
        return Response(serializer_class(instance).data)
    if request.method in ('PUT', 'PATCH'):
        serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return invalid(serializer)
        serializer.save()
        return Response(serializer.data)
    if delete_refusal:
        return Response({'message': delete_refusal}, status=status.HTTP_400_BAD_REQUEST)
    instance.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def setting_domain_list_create(request):
    return master_list_create(request, CompanySettingMasterDomain, CompanySettingMasterDomainSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def setting_domain_detail(request, pk):
    domain = get_object_or_404(CompanySettingMasterDomain, pk=pk)
    refusal = 'Cannot delete domain with functionalities' if domain.functionalities.exists() else None
    return master_detail(request, domain, CompanySettingMasterDomainSerializer, refusal)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def setting_functionality_list_create(request):
    return master_list_create(request, CompanySettingMasterFunctionality, CompanySettingMasterFunctionalitySerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def setting_functionality_detail(request, pk):
    functionality = get_object_or_404(CompanySettingMasterFunctionality, pk=pk)
    refusal = 'Cannot delete functionality with settings' if functionality.settings.exists() else None
    return master_detail(request, functionality, CompanySettingMasterFunctionalitySerializer, refusal)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def settings_master_list_create(request):
    return master_list_create(request, CompanySettingsMaster, CompanySettingsMasterSerializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsGlobalAdmin])
def settings_master_detail(request, pk):
    master = get_object_or_404(CompanySettingsMaster, pk=pk)
    refusal = 'Cannot delete a setting used by companies' if master.company_settings.exists() else None
    return master_detail(request, master, CompanySettingsMasterSerializer, refusal)


# Company setting views
def company_settings(request):
    return CompanySetting.objects.filter(company_id=get_company_context(request)).select_related('master')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsCompanyAdmin])
def company_setting_domain_list(request, domain_code):
    """Settings of one functional domain, ordered by functionality and position"""
    settings = company_settings(request).filter(master__setting_functional_domain_code=domain_code).order_by(
        'master__setting_functionality_code', 'master__setting_order_within_functionality', 'setting_code'
    )
    return Response(CompanySettingSerializer(settings, many=True).data)


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, IsCompanyAdmin])
def company_setting_detail(request, pk):
    """Read or change one setting value of the company"""
    setting = company_settings(request).filter(pk=pk).first()
    if setting is None:
        return Response({'message': 'Company setting not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(CompanySettingSerializer(setting).data)

    value = request.data.get('setting_value')
    if value is None:
        return Response({'message': 'setting_value is required'}, status=status.HTTP_400_BAD_REQUEST)
    value = str(value)
    try:
        previous = change_setting(setting, value, user=request.user)
    except SettingChangeRefused as e:
        return Response({'message': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info("Company %s changed %s from %s to %s", setting.company_id, setting.setting_code, previous, value)
    create_audit_log(
        request, action='setting_change', model_name='company_settings', object_id=setting.pk,
        object_name=setting.setting_code, changes={'setting_value': {'old': previous, 'new': value}},
    )
    return Response(CompanySettingSerializer(setting).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsCompanyAdmin])
def company_setting_dependents(request, pk):
    """Settings that can only be TRUE while this one is TRUE"""
    setting = company_settings(request).filter(pk=pk).first()
    if setting is None:
        return Response({'message': 'Company setting not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(CompanySettingSerializer(dependent_settings(setting), many=True).data)
