from django.db.models import Q
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from backend.core.utils import get_company_context
from backend.objects import services
from backend.objects.exceptions import ObjectError
from backend.objects.views import error_response
from backend.assets.serializers import AssetSerializer
from backend.quotes.serializers import QuoteSerializer
from .models import Account
from .serializers import AccountSerializer

CHILD_TYPE_FILTERS = {
    'contact': Q(is_company_contact=True),
    'shipping': Q(is_shipping_address=True, is_legal_entity=False),
    'legal_entity': Q(is_legal_entity=True),
}

SEARCH_FLAGS = {
    'isLegalEntity': 'is_legal_entity',
    'isPersonAccount': 'is_person_account',
    'isSelfEmployed': 'is_self_employed',
}


def is_true(value):
    return str(value).lower() in ('true', '1', 'yes')


def company_accounts(request):
    company_id = get_company_context(request)
    if not company_id:
        return Account.objects.none()
    return Account.objects.filter(company_id=company_id).select_related('owner', 'parent_account')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def account_search(request):
    """Accounts having any of the requested type flags; all accounts when none is requested"""
    accounts = company_accounts(request)
    condition = Q()
    for param, field in SEARCH_FLAGS.items():
        if is_true(request.query_params.get(param, '')):
            condition |= Q(**{field: True})
    if condition:
        accounts = accounts.filter(condition)
    return Response(AccountSerializer(accounts.order_by('name'), many=True).data)


def get_account_or_error(request, pk):
    return services.get_record('accounts', get_company_context(request), pk)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def account_children(request, pk):
    """Child accounts, optionally of one type (contact, shipping, legal_entity)"""
    try:
        account = get_account_or_error(request, pk)
    except ObjectError as e:
        return error_response(e)
    children = company_accounts(request).filter(parent_account=account)
    child_type = request.query_params.get('type')
    if child_type in CHILD_TYPE_FILTERS:
        children = children.filter(CHILD_TYPE_FILTERS[child_type])
    return Response(AccountSerializer(children.order_by('name'), many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def account_parents(request, pk):
    """The parent account as a one-element list, or an empty list"""
    try:
        account = get_account_or_error(request, pk)
    except ObjectError as e:
        return error_response(e)
    parents = [account.parent_account] if account.parent_account_id else []
    return Response(AccountSerializer(parents, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def account_quotes(request, pk):
    try:
        account = get_account_or_error(request, pk)
    except ObjectError as e:
        return error_response(e)
    quotes = account.quotes.filter(company_id=account.company_id).order_by('-created_date')
    return Response(QuoteSerializer(quotes, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def account_assets(request, pk):
    try:
        account = get_account_or_error(request, pk)
    except ObjectError as e:
        return error_response(e)
    assets = account.assets.filter(company_id=account.company_id).select_related('product').order_by('name')
    return Response(AssetSerializer(assets, many=True).data)
