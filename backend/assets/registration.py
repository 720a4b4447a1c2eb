"""Asset object registration for the generic record endpoints"""
from backend.objects.registry import ObjectType, registry
from .models import Asset
from .serializers import AssetSerializer


def register():
    registry.register(ObjectType(
        code='assets',
        model=Asset,
        serializer_class=AssetSerializer,
        default_sort='name',
        sortable_fields=('name', 'serial_number', 'install_status', 'installation_date', 'created_date'),
        search_fields=('name', 'serial_number'),
        select_related=('product', 'account'),
    ))
