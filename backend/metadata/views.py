import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from backend.core.permissions import IsCompanyAdmin, is_company_admin
from backend.core.utils import get_company_context, create_audit_log
from backend.objects.exceptions import UnknownObjectCode
from backend.objects.registry import registry
from .exceptions import LayoutNotFound
from .form_utils import build_default_form_values
from .models import FieldDefinition, ObjectLayout
from .serializers import FieldDefinitionSerializer, ObjectLayoutSerializer
from .services import (
    get_field_definitions, get_field_definition, get_field_type_map, get_definition_defaults, resolve_layout
)

logger = logging.getLogger(__name__)

ADMIN_REQUIRED = {'message': IsCompanyAdmin.message}
IMMUTABLE_FIELD_KEYS = ('api_code', 'type')


def unknown_object_response(object_code):
    if object_code in registry:
        return None
    return Response(UnknownObjectCode(object_code).as_response_data(), status=status.HTTP_404_NOT_FOUND)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def object_field_list_create(request, object_code):
    """List the effective field definitions of an object or add a custom field"""
    missing = unknown_object_response(object_code)
    if missing:
        return missing
    company_id = get_company_context(request)

    if request.method == 'GET':
        definitions = get_field_definitions(object_code, company_id)
        return Response(FieldDefinitionSerializer(definitions, many=True).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if not company_id:
        return Response({'message': 'Company context required'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = FieldDefinitionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    api_code = serializer.validated_data['api_code']
    if get_field_definition(object_code, api_code, company_id):
        return Response({'api_code': ['A field with this API code already exists']}, status=status.HTTP_400_BAD_REQUEST)

    definition = serializer.save(company_id=company_id, object_code=object_code, is_custom=True)
    logger.info("Custom field %s added to %s for company %s", api_code, object_code, company_id)
    create_audit_log(
        request, action='create', model_name='field_definitions', object_id=definition.pk,
        object_name=str(definition),
    )
    return Response(FieldDefinitionSerializer(definition).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def object_field_types(request, object_code):
    """Field type map of an object"""
    missing = unknown_object_response(object_code)
    if missing:
        return missing
    return Response(get_field_type_map(object_code, get_company_context(request)))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def object_field_defaults(request, object_code):
    """Default form values of a new record"""
    missing = unknown_object_response(object_code)
    if missing:
        return missing
    company_id = get_company_context(request)
    defaults = get_definition_defaults(get_field_definitions(object_code, company_id))
    return Response(build_default_form_values(get_field_type_map(object_code, company_id), defaults))


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def object_field_detail(request, object_code, api_code):
    """Retrieve, change or remove one field definition"""
    missing = unknown_object_response(object_code)
    if missing:
        return missing
    company_id = get_company_context(request)
    definition = get_field_definition(object_code, api_code, company_id)
    if definition is None:
        return Response({'message': 'Field not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(FieldDefinitionSerializer(definition).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if not company_id:
        return Response({'message': 'Company context required'}, status=status.HTTP_400_BAD_REQUEST)

    if request.method == 'PATCH':
        for key in IMMUTABLE_FIELD_KEYS:
            if key in request.data and request.data[key] != getattr(definition, key):
                return Response({'message': 'API code and type cannot be changed'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = FieldDefinitionSerializer(definition, data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            if definition.company_id is None:
                # Changes to a standard field become a company override
                definition.pk = None
                definition._state.adding = True
                definition.company_id = company_id
                definition.is_custom = False
            definition = serializer.save()
        create_audit_log(
            request, action='update', model_name='field_definitions', object_id=definition.pk,
            object_name=str(definition), changes={'fields': sorted(request.data.keys())},
        )
        return Response(FieldDefinitionSerializer(definition).data)

    # DELETE
    if definition.company_id is None:
        return Response({'message': 'Standard fields cannot be deleted'}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(
        request, action='delete', model_name='field_definitions', object_id=definition.pk,
        object_name=str(definition),
    )
    definition.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def layout_resolve(request, object_code, view_type):
    """Layout used for an object's table or detail view"""
    missing = unknown_object_response(object_code)
    if missing:
        return missing
    try:
        layout = resolve_layout(object_code, view_type, get_company_context(request))
    except LayoutNotFound as e:
        return Response({'message': str(e)}, status=status.HTTP_404_NOT_FOUND)
    return Response(ObjectLayoutSerializer(layout).data)


def visible_layouts(company_id):
    return ObjectLayout.objects.filter(Q(company__isnull=True) | Q(company_id=company_id))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def layout_list_create(request):
    """List company and default layouts or create a company layout"""
    company_id = get_company_context(request)
    if request.method == 'GET':
        layouts = visible_layouts(company_id)
        object_code = request.query_params.get('object_code')
        if object_code:
            layouts = layouts.filter(object_code=object_code)
        view_type = request.query_params.get('view_type')
        if view_type:
            layouts = layouts.filter(view_type=view_type)
        return Response(ObjectLayoutSerializer(layouts, many=True).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if not company_id:
        return Response({'message': 'Company context required'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = ObjectLayoutSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    object_code = serializer.validated_data['object_code']
    missing = unknown_object_response(object_code)
    if missing:
        return missing
    if ObjectLayout.objects.filter(
        company_id=company_id, object_code=object_code, view_type=serializer.validated_data['view_type']
    ).exists():
        return Response(
            {'message': 'A layout for this object and view already exists'},
            status=status.HTTP_400_BAD_REQUEST,
        )
    layout = serializer.save(company_id=company_id)
    create_audit_log(request, action='create', model_name='object_layouts', object_id=layout.pk, object_name=str(layout))
    return Response(ObjectLayoutSerializer(layout).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def layout_detail(request, pk):
    """Retrieve, update or delete a layout; default layouts are read-only"""
    company_id = get_company_context(request)
    layout = get_object_or_404(visible_layouts(company_id), pk=pk)

    if request.method == 'GET':
        return Response(ObjectLayoutSerializer(layout).data)

    if not is_company_admin(request.user):
        return Response(ADMIN_REQUIRED, status=status.HTTP_403_FORBIDDEN)
    if layout.company_id is None:
        return Response({'message': 'Default layouts cannot be modified'}, status=status.HTTP_403_FORBIDDEN)

    if request.method in ('PUT', 'PATCH'):
        data = request.data.copy()
        # Object and view of a layout are fixed
        data.pop('object_code', None)
        data.pop('view_type', None)
        serializer = ObjectLayoutSerializer(layout, data=data, partial=True)
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, action='update', model_name='object_layouts', object_id=layout.pk, object_name=str(layout))
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(request, action='delete', model_name='object_layouts', object_id=layout.pk, object_name=str(layout))
    layout.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)
