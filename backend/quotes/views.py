import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from backend.core.utils import get_company_context, create_audit_log
from backend.objects import services
from backend.objects.exceptions import ObjectError
from backend.objects.views import error_response
from .models import QuoteLine
from .serializers import QuoteLineSerializer

logger = logging.getLogger(__name__)

LINE_NOT_FOUND = {'message': 'Quote line not found'}


class BatchLineError(Exception):
    """Invalid line in a batch; rolls back the whole batch"""

    def __init__(self, index, errors):
        self.index = index
        self.errors = errors
        super().__init__(f"Invalid data in line {index}")


def line_payload(data):
    payload = data.dict() if hasattr(data, 'dict') else dict(data or {})
    for key in ('id', 'quote', 'quote_id'):
        payload.pop(key, None)
    if payload.get('product') == '':
        payload['product'] = None
    return payload


def company_lines(request):
    company_id = get_company_context(request)
    if not company_id:
        return QuoteLine.objects.none()
    return QuoteLine.objects.filter(quote__company_id=company_id).select_related('quote', 'product')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def quote_line_list_create(request, pk):
    """Lines of a quote, or add a line to it"""
    try:
        quote = services.get_record('quotes', get_company_context(request), pk)
    except ObjectError as e:
        return error_response(e)

    if request.method == 'GET':
        lines = quote.lines.select_related('product')
        return Response(QuoteLineSerializer(lines, many=True).data)

    serializer = QuoteLineSerializer(data=line_payload(request.data), context={'company': quote.company})
    if not serializer.is_valid():
        return Response({'message': 'Invalid data', 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
    with transaction.atomic():
        line = serializer.save(quote=quote)
        quote.recalculate_totals()
    create_audit_log(request, action='create', model_name='quote_lines', object_id=line.pk, object_name=str(line))
    return Response(QuoteLineSerializer(line).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def quote_line_detail(request, pk):
    """Retrieve, update or delete a quote line; its quote cannot be changed"""
    line = company_lines(request).filter(pk=pk).first()
    if line is None:
        return Response(LINE_NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
    quote = line.quote

    if request.method == 'GET':
        return Response(QuoteLineSerializer(line).data)

    if request.method in ('PUT', 'PATCH'):
        serializer = QuoteLineSerializer(
            line, data=line_payload(request.data), partial=request.method == 'PATCH',
            context={'company': quote.company},
        )
        if not serializer.is_valid():
            return Response({'message': 'Invalid data', 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)
        with transaction.atomic():
            line = serializer.save()
            quote.recalculate_totals()
        create_audit_log(
            request, action='update', model_name='quote_lines', object_id=line.pk, object_name=str(line),
            changes={'fields': sorted(serializer.validated_data)},
        )
        return Response(QuoteLineSerializer(line).data)

    create_audit_log(request, action='delete', model_name='quote_lines', object_id=line.pk, object_name=str(line))
    with transaction.atomic():
        line.delete()
        quote.recalculate_totals()
    return Response(status=status.HTTP_204_NO_CONTENT)


def save_batch(quote, lines):
    saved = []
    for index, data in enumerate(lines, start=1):
        if not isinstance(data, dict):
            raise BatchLineError(index, {'non_field_errors': ['Each line must be an object']})
        line_id = data.get('id')
        instance = None
        if line_id not in (None, ''):
            try:
                line_id = int(line_id)
            except (TypeError, ValueError):
                raise BatchLineError(index, {'id': ['Line id must be an integer']})
            instance = quote.lines.filter(pk=line_id).first()
            if instance is None:
                raise BatchLineError(index, {'id': ['Quote line not found']})
        serializer = QuoteLineSerializer(
            instance, data=line_payload(data), partial=instance is not None,
            context={'company': quote.company},
        )
        if not serializer.is_valid():
            raise BatchLineError(index, serializer.errors)
        saved.append(serializer.save(quote=quote))
    quote.recalculate_totals()
    return saved


@api_view(['POST', 'DELETE'])
@permission_classes([IsAuthenticated])
def quote_line_batch(request, pk):
    """
    Save or delete several lines of a quote at once.

    POST ``{"lines": [...]}``: lines carrying an ``id`` are updated, the
    others are created. Nothing is saved when any line is invalid.
    DELETE ``{"ids": [...]}``: deletes those lines of the quote.
    """
    try:
        quote = services.get_record('quotes', get_company_context(request), pk)
    except ObjectError as e:
        return error_response(e)

    if request.method == 'POST':
        lines = request.data.get('lines') if isinstance(request.data, dict) else None
        if not isinstance(lines, list):
            return Response({'message': "Request body must contain 'lines' array"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            with transaction.atomic():
                saved = save_batch(quote, lines)
        except BatchLineError as e:
            return Response({'message': str(e), 'errors': e.errors}, status=status.HTTP_400_BAD_REQUEST)
        logger.info("Saved %s lines of quote %s", len(saved), quote.pk)
        create_audit_log(
            request, action='update', model_name='quotes', object_id=quote.pk, object_name=str(quote),
            changes={'lines_saved': [line.pk for line in saved]},
        )
        return Response(QuoteLineSerializer(saved, many=True).data)

    ids = request.data.get('ids') if isinstance(request.data, dict) else None
    if not isinstance(ids, list):
        return Response({'message': "Request body must contain 'ids' array"}, status=status.HTTP_400_BAD_REQUEST)
    try:
        ids = [int(line_id) for line_id in ids]
    except (TypeError, ValueError):
        return Response({'message': 'Line ids must be integers'}, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        deleted_count, _ = quote.lines.filter(pk__in=ids).delete()
        quote.recalculate_totals()
    if deleted_count == 0 and ids:
        return Response({'message': 'Quote lines not found'}, status=status.HTTP_404_NOT_FOUND)
    create_audit_log(
        request, action='update', model_name='quotes', object_id=quote.pk, object_name=str(quote),
        changes={'lines_deleted': ids},
    )
    return Response({'deleted_count': deleted_count})
