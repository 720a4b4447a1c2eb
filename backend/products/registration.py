"""Product object registration for the generic record endpoints"""
from backend.objects.registry import ObjectType, registry
from .models import Product
from .serializers import ProductSerializer


def product_delete_refusal(product):
    if product.quote_lines.exists():
        return 'Cannot delete product used in quote lines'
    if product.assets.exists():
        return 'Cannot delete product with assets'
    return None


def register():
    registry.register(ObjectType(
        code='products',
        model=Product,
        serializer_class=ProductSerializer,
        default_sort='name',
        sortable_fields=('name', 'sales_category', 'sales_unit_price', 'created_date'),
        search_fields=('name', 'sales_category'),
        select_related=('sales_uom',),
        can_delete=product_delete_refusal,
    ))
