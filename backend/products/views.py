from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from backend.core.utils import get_company_context, create_audit_log
from .models import UnitOfMeasure
from .serializers import UnitOfMeasureSerializer

NOT_FOUND = {'message': 'Unit of measure not found'}


# Unit of measure views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def unit_of_measure_list_create(request):
    """List the company's units of measure or create a new one"""
    company_id = get_company_context(request)
    if request.method == 'GET':
        if not company_id:
            return Response([])
        units = UnitOfMeasure.objects.filter(company_id=company_id)
        unit_type = request.query_params.get('type')
        if unit_type:
            units = units.filter(type=unit_type)
        serializer = UnitOfMeasureSerializer(units, many=True)
        return Response(serializer.data)
    else:
        if not company_id:
            return Response({'message': 'Company context required'}, status=status.HTTP_400_BAD_REQUEST)
        serializer = UnitOfMeasureSerializer(data=request.data)
        if serializer.is_valid():
            unit = serializer.save(company_id=company_id)
            create_audit_log(request, action='create', model_name='unit-of-measures', object_id=unit.pk, object_name=str(unit))
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def unit_of_measure_detail(request, pk):
    """Retrieve, update or delete a unit of measure"""
    unit = UnitOfMeasure.objects.filter(pk=pk, company_id=get_company_context(request)).first()
    if unit is None:
        return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        serializer = UnitOfMeasureSerializer(unit)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UnitOfMeasureSerializer(unit, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request, action='update', model_name='unit-of-measures', object_id=unit.pk, object_name=str(unit))
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if unit.products.exists():
            return Response(
                {'message': 'Cannot delete unit of measure used by products'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        create_audit_log(request, action='delete', model_name='unit-of-measures', object_id=unit.pk, object_name=str(unit))
        unit.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
