import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from backend.core.utils import get_company_context
from backend.metadata.exceptions import LayoutNotFound
from . import services
from .exceptions import ObjectError

logger = logging.getLogger(__name__)


def error_response(exc):
    """Response for a record operation or layout lookup failure"""
    if isinstance(exc, LayoutNotFound):
        return Response({'message': str(exc)}, status=status.HTTP_404_NOT_FOUND)
    return Response(exc.as_response_data(), status=exc.status_code)


def list_params(request):
    return {
        'sort_by': request.query_params.get('sortBy') or None,
        'sort_order': request.query_params.get('sortOrder') or None,
        'search': request.query_params.get('search', '').strip() or None,
    }


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def object_list_create(request, object_code):
    """List records of an object or create one"""
    company_id = get_company_context(request)
    try:
        if request.method == 'GET':
            records = services.list_records(object_code, company_id, **list_params(request))
            return Response(services.serialize_record(object_code, records, many=True))

        instance = services.create_record(object_code, company_id, request.data, user=request.user, request=request)
        return Response(services.serialize_record(object_code, instance), status=status.HTTP_201_CREATED)
    except ObjectError as e:
        return error_response(e)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def object_detail(request, object_code, pk):
    """Retrieve, update or delete a record"""
    company_id = get_company_context(request)
    try:
        if request.method == 'GET':
            instance = services.get_record(object_code, company_id, pk)
            return Response(services.serialize_record(object_code, instance))
        elif request.method in ('PUT', 'PATCH'):
            instance = services.update_record(
                object_code, company_id, pk, request.data, user=request.user,
                partial=request.method == 'PATCH', request=request,
            )
            return Response(services.serialize_record(object_code, instance))
        else:  # DELETE
            services.delete_record(object_code, company_id, pk, user=request.user, request=request)
            return Response(status=status.HTTP_204_NO_CONTENT)
    except ObjectError as e:
        return error_response(e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def object_render(request, object_code, pk):
    """Detail view of a record in view or edit mode"""
    mode = request.query_params.get('mode', 'view')
    try:
        return Response(services.render_record(object_code, get_company_context(request), pk, mode=mode))
    except (ObjectError, LayoutNotFound) as e:
        return error_response(e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def object_new_render(request, object_code):
    """Edit form of a new record"""
    try:
        return Response(services.render_record(object_code, get_company_context(request), None, mode='edit'))
    except (ObjectError, LayoutNotFound) as e:
        return error_response(e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def object_table(request, object_code):
    """Table view of an object's records"""
    try:
        return Response(services.render_table(object_code, get_company_context(request), **list_params(request)))
    except (ObjectError, LayoutNotFound) as e:
        return error_response(e)
