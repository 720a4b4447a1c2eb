"""Account object registration for the generic record endpoints"""
from django.contrib.auth import get_user_model
from backend.objects.exceptions import RecordValidationError
from backend.objects.registry import ObjectType, registry
from .models import Account
from .serializers import AccountSerializer

User = get_user_model()


def check_owner(owner_id, company):
    try:
        owner_id = int(owner_id)
    except (TypeError, ValueError):
        owner_id = None
    if owner_id is None or not User.objects.filter(pk=owner_id, company=company).exists():
        raise RecordValidationError({'owner': ['Owner not found']}, message='Owner not found')


def prepare_account_create(data, company, user):
    if not data.get('owner'):
        data['owner'] = user.pk if user is not None else None
    if not data.get('owner'):
        raise RecordValidationError({'owner': ['Owner not found']}, message='Owner not found')
    check_owner(data['owner'], company)
    return data


def prepare_account_update(instance, data):
    if data.get('owner'):
        check_owner(data['owner'], instance.company)
    return data


def account_delete_refusal(account):
    if account.child_accounts.exists():
        return 'Cannot delete account with child accounts'
    if account.quotes.exists():
        return 'Cannot delete account with quotes'
    if account.assets.exists():
        return 'Cannot delete account with assets'
    return None


def register():
    registry.register(ObjectType(
        code='accounts',
        model=Account,
        serializer_class=AccountSerializer,
        default_sort='name',
        sortable_fields=('name', 'industry', 'address', 'created_date'),
        search_fields=('name', 'email', 'company_official_name'),
        select_related=('owner', 'parent_account'),
        prepare_create=prepare_account_create,
        prepare_update=prepare_account_update,
        can_delete=account_delete_refusal,
    ))
