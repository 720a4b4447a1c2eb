"""Quote object registration for the generic record endpoints"""
from backend.objects.registry import ObjectType, registry
from .models import Quote
from .serializers import QuoteSerializer

NULLABLE_KEYS = ('customer', 'quote_expiration_date')


def blank_to_null(data):
    for key in NULLABLE_KEYS:
        if key in data and data[key] in ('', None):
            data[key] = None
    return data


def prepare_quote_create(data, company, user):
    return blank_to_null(data)


def prepare_quote_update(instance, data):
    return blank_to_null(data)


def register():
    registry.register(ObjectType(
        code='quotes',
        model=Quote,
        serializer_class=QuoteSerializer,
        default_sort='created_date',
        sortable_fields=('name', 'customer_name', 'quote_expiration_date', 'net_grand_total', 'created_date'),
        search_fields=('name', 'customer_name'),
        select_related=('customer',),
        prepare_create=prepare_quote_create,
        prepare_update=prepare_quote_update,
    ))
