"""Field metadata and layout lookups"""
import logging

from django.conf import settings
from backend.core.cache_utils import cached_query, invalidate_cache_pattern
from .exceptions import LayoutNotFound
from .models import FieldDefinition, ObjectLayout

logger = logging.getLogger(__name__)

FIELD_TYPES_CACHE_PREFIX = 'field_types'


def get_field_definitions(object_code, company_id=None):
    """
    Standard definitions merged with the company's own rows, by sort order.

    A company row replaces the standard row with the same api_code.
    """
    merged = {}
    for definition in FieldDefinition.objects.filter(object_code=object_code, company__isnull=True):
        merged[definition.api_code] = definition
    if company_id:
        for definition in FieldDefinition.objects.filter(object_code=object_code, company_id=company_id):
            merged[definition.api_code] = definition
    return sorted(merged.values(), key=lambda d: (d.sort_order, d.api_code))


def get_field_definition(object_code, api_code, company_id=None):
    """Single effective definition or None"""
    if company_id:
        definition = FieldDefinition.objects.filter(
            object_code=object_code, api_code=api_code, company_id=company_id
        ).first()
        if definition:
            return definition
    return FieldDefinition.objects.filter(
        object_code=object_code, api_code=api_code, company__isnull=True
    ).first()


def build_field_type_map(definitions):
    return {
        definition.api_code: {
            'api_code': definition.api_code,
            'type': definition.type,
            'subtype': definition.subtype or None,
            'field_type': definition.field_type or None,
            'is_multi_select': definition.is_multi_select,
        }
        for definition in definitions
    }


@cached_query(
    cache_ttl=settings.FIELD_METADATA_CACHE_TTL,
    key_prefix=lambda object_code, company_id=None: f"{FIELD_TYPES_CACHE_PREFIX}:{object_code}",
)
def get_field_type_map(object_code, company_id=None):
    """api_code -> {api_code, type, subtype, field_type, is_multi_select}"""
    return build_field_type_map(get_field_definitions(object_code, company_id))


def get_definition_defaults(definitions):
    """Configured default values of the given definitions"""
    return {d.api_code: d.default_value for d in definitions if d.default_value is not None}


def invalidate_field_cache(object_code):
    invalidate_cache_pattern(f"{FIELD_TYPES_CACHE_PREFIX}:{object_code}")
    logger.debug("Invalidated field metadata cache for %s", object_code)


def resolve_layout(object_code, view_type, company_id=None):
    """Company layout, else the default layout, else LayoutNotFound"""
    if company_id:
        layout = ObjectLayout.objects.filter(
            object_code=object_code, view_type=view_type, company_id=company_id
        ).first()
        if layout:
            return layout
    layout = ObjectLayout.objects.filter(
        object_code=object_code, view_type=view_type, company__isnull=True
    ).first()
    if layout:
        return layout
    logger.warning("No %s layout found for %s (company %s)", view_type, object_code, company_id)
    raise LayoutNotFound(object_code, view_type, company_id)
