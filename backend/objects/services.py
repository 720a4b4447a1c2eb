"""
Generic record operations shared by every registered business object.

All operations are scoped to a company: records of other companies behave
as if they did not exist, and the company of a record always comes from the
caller's company context, never from the payload.
"""
import logging

from django.core.exceptions import FieldDoesNotExist
from django.db import transaction
from django.db.models import Q

from backend.core.models import Company
from backend.core.utils import create_audit_log
from backend.metadata.form_utils import transform_record_to_form_values
from backend.metadata.serializers import FieldDefinitionSerializer, ObjectLayoutSerializer
from backend.metadata.services import (
    get_field_definitions, get_field_type_map, get_definition_defaults, resolve_layout
)
from backend.metadata.validation import validate_record_data
from .exceptions import CompanyContextRequired, DeleteBlocked, RecordNotFound, RecordValidationError
from .registry import registry

logger = logging.getLogger(__name__)

PROTECTED_KEYS = ('id', 'company', 'company_id')
TEXT_FIELD_TYPES = ('CharField', 'TextField', 'EmailField', 'URLField')
RENDER_MODES = ('view', 'edit')


def _payload(data):
    """Plain dict copy of request data without keys the caller may not set"""
    payload = data.dict() if hasattr(data, 'dict') else dict(data or {})
    for key in PROTECTED_KEYS:
        payload.pop(key, None)
    return payload


def _scoped_queryset(object_type, company_id):
    queryset = object_type.model.objects.filter(company_id=company_id)
    if object_type.select_related:
        queryset = queryset.select_related(*object_type.select_related)
    return queryset


def _is_text_field(model, name):
    try:
        field = model._meta.get_field(name)
    except FieldDoesNotExist:
        return False
    return field.get_internal_type() in TEXT_FIELD_TYPES


def search_filter(object_type, company_id, search):
    """Case-insensitive OR across search fields and searchable definitions"""
    query = Q()
    fields = list(object_type.search_fields)
    for definition in get_field_definitions(object_type.code, company_id):
        if not definition.allow_search:
            continue
        if definition.is_custom:
            query |= Q(**{f"custom_fields__{definition.api_code}__icontains": search})
        elif definition.api_code not in fields and _is_text_field(object_type.model, definition.api_code):
            fields.append(definition.api_code)
    for field in fields:
        query |= Q(**{f"{field}__icontains": search})
    return query


def list_records(object_code, company_id, sort_by=None, sort_order=None, search=None, filters=None):
    """Company records of an object, searched, filtered and sorted"""
    object_type = registry.get(object_code)
    if not company_id:
        return object_type.model.objects.none()

    queryset = _scoped_queryset(object_type, company_id)
    if filters:
        queryset = queryset.filter(**filters)
    if search:
        queryset = queryset.filter(search_filter(object_type, company_id, search))

    field = sort_by if sort_by in object_type.sortable_fields else object_type.default_sort
    prefix = '-' if sort_order == 'desc' else ''
    return queryset.order_by(f"{prefix}{field}", f"{prefix}pk")


def get_record(object_code, company_id, pk):
    object_type = registry.get(object_code)
    record = None
    if company_id:
        record = _scoped_queryset(object_type, company_id).filter(pk=pk).first()
    if record is None:
        raise RecordNotFound(object_type.label)
    return record


def serialize_record(object_code, instance, many=False):
    object_type = registry.get(object_code)
    return object_type.serializer_class(instance, many=many).data


def _serializer_context(company, user, request):
    return {'company': company, 'user': user, 'request': request}


@transaction.atomic
def create_record(object_code, company_id, data, user=None, request=None):
    if not company_id:
        raise CompanyContextRequired()
    object_type = registry.get(object_code)
    company = Company.objects.get(pk=company_id)

    payload = _payload(data)
    if object_type.prepare_create:
        payload = object_type.prepare_create(payload, company, user)

    errors = validate_record_data(get_field_definitions(object_code, company_id), payload)
    if errors:
        raise RecordValidationError(errors)

    serializer = object_type.serializer_class(data=payload, context=_serializer_context(company, user, request))
    if not serializer.is_valid():
        raise RecordValidationError(serializer.errors)
    instance = serializer.save(company=company)

    logger.info("Created %s %s for company %s", object_code, instance.pk, company_id)
    create_audit_log(
        request, action='create', model_name=object_code, object_id=instance.pk,
        user=user, object_name=str(instance), company_id=company_id,
    )
    return instance


@transaction.atomic
def update_record(object_code, company_id, pk, data, user=None, partial=True, request=None):
    object_type = registry.get(object_code)
    instance = get_record(object_code, company_id, pk)

    payload = _payload(data)
    if object_type.prepare_update:
        payload = object_type.prepare_update(instance, payload)

    errors = validate_record_data(get_field_definitions(object_code, company_id), payload, partial=partial)
    if errors:
        raise RecordValidationError(errors)

    if partial and isinstance(payload.get('custom_fields'), dict):
        payload['custom_fields'] = {**(instance.custom_fields or {}), **payload['custom_fields']}

    serializer = object_type.serializer_class(
        instance, data=payload, partial=partial,
        context=_serializer_context(instance.company, user, request),
    )
    if not serializer.is_valid():
        raise RecordValidationError(serializer.errors)
    instance = serializer.save()

    create_audit_log(
        request, action='update', model_name=object_code, object_id=instance.pk,
        user=user, object_name=str(instance), company_id=company_id,
        changes={'fields': sorted(payload)},
    )
    return instance


@transaction.atomic
def delete_record(object_code, company_id, pk, user=None, request=None):
    object_type = registry.get(object_code)
    instance = get_record(object_code, company_id, pk)

    if object_type.can_delete:
        refusal = object_type.can_delete(instance)
        if refusal:
            raise DeleteBlocked(refusal)

    create_audit_log(
        request, action='delete', model_name=object_code, object_id=instance.pk,
        user=user, object_name=str(instance), company_id=company_id,
    )
    logger.info("Deleting %s %s of company %s", object_code, instance.pk, company_id)
    instance.delete()


def render_record(object_code, company_id, pk=None, mode='view'):
    """
    Detail view payload of a record.

    ``view`` returns the serialized record; ``edit`` returns form values,
    which for a new record (``pk=None``) are the defaults of every field.
    Both carry the resolved detail layout and the field definitions.
    """
    if mode not in RENDER_MODES:
        raise RecordValidationError({'mode': [f"Mode must be one of: {', '.join(RENDER_MODES)}"]}, message='Invalid mode')
    if pk is None and mode != 'edit':
        raise RecordValidationError({'mode': ["A new record can only be rendered in edit mode"]}, message='Invalid mode')

    object_type = registry.get(object_code)
    record = serialize_record(object_code, get_record(object_code, company_id, pk)) if pk is not None else None
    layout = resolve_layout(object_code, 'detail', company_id)
    definitions = get_field_definitions(object_code, company_id)

    result = {
        'object_code': object_code,
        'label': object_type.label,
        'mode': mode,
        'id': pk,
        'layout': ObjectLayoutSerializer(layout).data,
        'fields': FieldDefinitionSerializer(definitions, many=True).data,
    }
    if mode == 'view':
        result['record'] = record
        return result

    field_type_map = get_field_type_map(object_code, company_id)
    if record is None:
        result['values'] = transform_record_to_form_values(None, field_type_map, get_definition_defaults(definitions))
    else:
        flat = {**record, **(record.get('custom_fields') or {})}
        result['values'] = transform_record_to_form_values(flat, field_type_map)
    return result


def render_table(object_code, company_id, sort_by=None, sort_order=None, search=None):
    """Table view payload: layout, field types and the record list"""
    object_type = registry.get(object_code)
    layout = resolve_layout(object_code, 'table', company_id)
    records = list_records(object_code, company_id, sort_by=sort_by, sort_order=sort_order, search=search)
    data = object_type.serializer_class(records, many=True).data
    return {
        'object_code': object_code,
        'label': object_type.plural_label,
        'mode': 'table',
        'layout': ObjectLayoutSerializer(layout).data,
        'field_types': get_field_type_map(object_code, company_id),
        'records': data,
        'count': len(data),
    }
