"""
Test suite for the generic object endpoints
Tests: registry, record services, detail/table rendering and error responses
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.objects import services
from backend.objects.exceptions import UnknownObjectCode, RecordNotFound, CompanyContextRequired
from backend.objects.registry import ObjectRegistry, ObjectType, registry
from backend.accounts.models import Account
from backend.accounts.serializers import AccountSerializer


class RegistryTests(SimpleTestCase):
    """Test object registration"""

    def test_business_objects_registered(self):
        self.assertEqual(registry.codes(), ['accounts', 'assets', 'products', 'quotes'])

    def test_labels_from_object_code(self):
        self.assertEqual(registry.get('accounts').label, 'Account')
        self.assertEqual(registry.get('accounts').plural_label, 'Accounts')

    def test_unknown_code_raises(self):
        with self.assertRaises(UnknownObjectCode) as ctx:
            registry.get('spaceships')
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.message, 'Unknown object: spaceships')

    def test_register_and_unregister(self):
        local = ObjectRegistry()
        local.register(ObjectType('accounts', Account, AccountSerializer))
        self.assertIn('accounts', local)
        self.assertEqual(local.get('accounts').sortable_fields, ('name',))
        local.unregister('accounts')
        self.assertNotIn('accounts', local)


class RecordServiceTests(TestCase):
    """Test the record service functions directly"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.company = self.user.company

    def test_get_record_of_other_company(self):
        stranger = TestDataFactory.create_user()
        account = TestDataFactory.create_account(stranger.company, stranger)
        with self.assertRaises(RecordNotFound):
            services.get_record('accounts', self.company.id, account.id)

    def test_create_without_company(self):
        with self.assertRaises(CompanyContextRequired):
            services.create_record('accounts', None, {'name': 'Acme'}, user=self.user)

    def test_search_includes_searchable_custom_fields(self):
        TestDataFactory.create_field_definition(
            'accounts', 'region', company=self.company, is_custom=True, allow_search=True
        )
        TestDataFactory.create_account(self.company, self.user, name='North', custom_fields={'region': 'Nordics'})
        TestDataFactory.create_account(self.company, self.user, name='South', custom_fields={'region': 'Iberia'})
        records = services.list_records('accounts', self.company.id, search='nordic')
        self.assertEqual([r.name for r in records], ['North'])

    def test_unsortable_field_falls_back_to_default(self):
        TestDataFactory.create_account(self.company, self.user, name='B')
        TestDataFactory.create_account(self.company, self.user, name='A')
        records = services.list_records('accounts', self.company.id, sort_by='tax_id')
        self.assertEqual([r.name for r in records], ['A', 'B'])


class ObjectEndpointTests(TestCase):
    """Test generic list/detail endpoints and error responses"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_unknown_object(self):
        response = self.client.get('/api/v1/spaceships/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Unknown object: spaceships')

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/accounts/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_put_replaces_record(self):
        account = TestDataFactory.create_account(self.company, self.user, name='Old', email='old@example.com')
        response = self.client.put(
            f'/api/v1/accounts/{account.id}/', {'name': 'New', 'owner': self.user.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'New')

    def test_update_of_foreign_record_not_found(self):
        stranger = TestDataFactory.create_user()
        account = TestDataFactory.create_account(stranger.company, stranger)
        response = self.client.patch(f'/api/v1/accounts/{account.id}/', {'name': 'Hijacked'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        account.refresh_from_db()
        self.assertNotEqual(account.name, 'Hijacked')


class RenderTests(TestCase):
    """Test detail and table rendering"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        TestDataFactory.create_field_definition('assets', 'name', sort_order=10)
        TestDataFactory.create_field_definition('assets', 'quantity', type='NumberField', default_value=1, sort_order=20)
        TestDataFactory.create_field_definition(
            'assets', 'install_status', type='DropDownListField', default_value='Planned', sort_order=30,
            value_set=[{'value': 'Planned', 'label': 'Planned'}, {'value': 'Installed', 'label': 'Installed'}],
        )
        TestDataFactory.create_field_definition(
            'assets', 'warranty', type='CheckboxField', company=self.company, is_custom=True, sort_order=40
        )
        TestDataFactory.create_layout('assets', 'detail')
        TestDataFactory.create_layout('assets', 'table', {'columns': ['name', 'quantity']})

    def test_new_record_form_uses_defaults(self):
        response = self.client.get('/api/v1/assets/new/render/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['mode'], 'edit')
        self.assertIsNone(response.data['id'])
        self.assertEqual(response.data['values']['name'], '')
        self.assertEqual(response.data['values']['quantity'], 1)
        self.assertEqual(response.data['values']['install_status'], 'Planned')
        self.assertEqual(response.data['values']['warranty'], False)
        self.assertEqual(response.data['label'], 'Asset')

    def test_view_mode_returns_record(self):
        asset = TestDataFactory.create_asset(self.company, serial_number='SN-1', quantity=Decimal('2'))
        response = self.client.get(f'/api/v1/assets/{asset.id}/render/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['record']['serial_number'], 'SN-1')
        self.assertEqual(response.data['layout']['view_type'], 'detail')
        self.assertEqual([f['api_code'] for f in response.data['fields']], ['name', 'quantity', 'install_status', 'warranty'])

    def test_edit_mode_converts_values(self):
        asset = TestDataFactory.create_asset(
            self.company, quantity=Decimal('2.5'), custom_fields={'warranty': True}
        )
        response = self.client.get(f'/api/v1/assets/{asset.id}/render/?mode=edit')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['values']['quantity'], 2.5)
        self.assertIs(response.data['values']['warranty'], True)

    def test_invalid_mode(self):
        asset = TestDataFactory.create_asset(self.company)
        response = self.client.get(f'/api/v1/assets/{asset.id}/render/?mode=print')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_company_layout_wins(self):
        TestDataFactory.create_layout('assets', 'detail', company=self.company, name='Ours')
        response = self.client.get('/api/v1/assets/new/render/')
        self.assertEqual(response.data['layout']['name'], 'Ours')

    def test_missing_layout(self):
        response = self.client.get('/api/v1/products/new/render/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_table(self):
        TestDataFactory.create_asset(self.company, name='Alpha')
        TestDataFactory.create_asset(self.company, name='Beta')
        response = self.client.get('/api/v1/assets/table/?sortOrder=desc')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['label'], 'Assets')
        self.assertEqual(response.data['count'], 2)
        self.assertEqual([r['name'] for r in response.data['records']], ['Beta', 'Alpha'])
        self.assertEqual(response.data['layout']['definition']['columns'], ['name', 'quantity'])
        self.assertEqual(response.data['field_types']['quantity']['type'], 'NumberField')
