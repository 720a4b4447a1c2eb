"""
Test suite for Accounts module
Tests: account CRUD through the object endpoints, ownership, hierarchy and account lookups
"""
from unittest import mock

from django.core.cache import cache
from django.db import IntegrityError, transaction
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.accounts.models import Account


class AccountAPITests(TestCase):
    """Test account endpoints"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_account_defaults_owner_and_company(self):
        response = self.client.post('/api/v1/accounts/', {'name': 'Acme'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['owner'], self.user.id)
        self.assertEqual(response.data['company'], self.company.id)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='accounts').exists())

    def test_failed_audit_write_keeps_account(self):
        def failing_create(**kwargs):
            with transaction.mark_for_rollback_on_error():
                raise IntegrityError('audit insert failed')

        with mock.patch.object(AuditLog.objects, 'create', side_effect=failing_create):
            response = self.client.post('/api/v1/accounts/', {'name': 'Acme'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Account.objects.filter(name='Acme', company=self.company).exists())
        self.assertFalse(AuditLog.objects.filter(model_name='accounts').exists())

    def test_company_in_payload_is_ignored(self):
        other = TestDataFactory.create_company()
        response = self.client.post('/api/v1/accounts/', {'name': 'Acme', 'company': other.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Account.objects.get(pk=response.data['id']).company_id, self.company.id)

    def test_owner_from_other_company_rejected(self):
        stranger = TestDataFactory.create_user()
        response = self.client.post('/api/v1/accounts/', {'name': 'Acme', 'owner': stranger.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Owner not found')

    def test_list_is_company_scoped(self):
        TestDataFactory.create_account(self.company, self.user, name='Mine')
        stranger = TestDataFactory.create_user()
        TestDataFactory.create_account(stranger.company, stranger, name='Theirs')
        response = self.client.get('/api/v1/accounts/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([a['name'] for a in response.data], ['Mine'])

    def test_list_sorting_and_search(self):
        TestDataFactory.create_account(self.company, self.user, name='Beta', email='beta@example.com')
        TestDataFactory.create_account(self.company, self.user, name='Alpha')
        response = self.client.get('/api/v1/accounts/?sortBy=name&sortOrder=desc')
        self.assertEqual([a['name'] for a in response.data], ['Beta', 'Alpha'])
        response = self.client.get('/api/v1/accounts/?search=BETA@')
        self.assertEqual([a['name'] for a in response.data], ['Beta'])

    def test_foreign_account_not_found(self):
        stranger = TestDataFactory.create_user()
        account = TestDataFactory.create_account(stranger.company, stranger)
        response = self.client.get(f'/api/v1/accounts/{account.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Account not found')

    def test_partial_update_merges_custom_fields(self):
        TestDataFactory.create_field_definition('accounts', 'tier', is_custom=True, company=self.company)
        TestDataFactory.create_field_definition('accounts', 'region', is_custom=True, company=self.company)
        account = TestDataFactory.create_account(self.company, self.user, custom_fields={'tier': 'Gold'})
        response = self.client.patch(
            f'/api/v1/accounts/{account.id}/', {'custom_fields': {'region': 'EMEA'}}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['custom_fields'], {'tier': 'Gold', 'region': 'EMEA'})

    def test_unknown_custom_field_rejected(self):
        response = self.client.post(
            '/api/v1/accounts/', {'name': 'Acme', 'custom_fields': {'bogus': 1}}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('custom_fields', response.data['errors'])

    def test_required_definition_enforced(self):
        TestDataFactory.create_field_definition('accounts', 'name', required=True)
        response = self.client.post('/api/v1/accounts/', {'email': 'x@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['errors']['name'], ['This field is required.'])

    def test_delete_refused_with_children(self):
        parent = TestDataFactory.create_account(self.company, self.user, name='Parent')
        TestDataFactory.create_account(self.company, self.user, name='Child', parent_account=parent)
        response = self.client.delete(f'/api/v1/accounts/{parent.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete account with child accounts')

    def test_delete_refused_with_quotes(self):
        account = TestDataFactory.create_account(self.company, self.user)
        TestDataFactory.create_quote(self.company, customer=account)
        response = self.client.delete(f'/api/v1/accounts/{account.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete account with quotes')

    def test_delete_refused_with_assets(self):
        account = TestDataFactory.create_account(self.company, self.user)
        TestDataFactory.create_asset(self.company, account=account)
        response = self.client.delete(f'/api/v1/accounts/{account.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete account with assets')
        self.assertTrue(Account.objects.filter(pk=account.id).exists())

    def test_delete_account(self):
        account = TestDataFactory.create_account(self.company, self.user)
        response = self.client.delete(f'/api/v1/accounts/{account.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Account.objects.filter(pk=account.id).exists())

    def test_parent_cycle_rejected(self):
        parent = TestDataFactory.create_account(self.company, self.user, name='Parent')
        child = TestDataFactory.create_account(self.company, self.user, name='Child', parent_account=parent)
        response = self.client.patch(f'/api/v1/accounts/{parent.id}/', {'parent_account': child.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('parent_account', response.data['errors'])

    def test_no_company_context(self):
        user = TestDataFactory.create_user()
        user.company = None
        user.save()
        client = AuthenticatedAPIClient()
        client.authenticate_user(user)
        self.assertEqual(client.get('/api/v1/accounts/').data, [])
        response = client.post('/api/v1/accounts/', {'name': 'Acme'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Company context required')


class AccountLookupTests(TestCase):
    """Test account search, children and parents endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.parent = TestDataFactory.create_account(self.company, self.user, name='Parent', is_legal_entity=True)
        self.contact = TestDataFactory.create_account(
            self.company, self.user, name='Contact', parent_account=self.parent, is_company_contact=True
        )
        self.shipping = TestDataFactory.create_account(
            self.company, self.user, name='Warehouse', parent_account=self.parent, is_shipping_address=True
        )
        self.person = TestDataFactory.create_account(self.company, self.user, name='Jane', is_person_account=True)

    def test_search_by_flags(self):
        response = self.client.get('/api/v1/accounts/search/?isLegalEntity=true&isPersonAccount=true')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([a['name'] for a in response.data], ['Jane', 'Parent'])

    def test_search_without_flags_returns_all(self):
        response = self.client.get('/api/v1/accounts/search/')
        self.assertEqual(len(response.data), 4)

    def test_children_by_type(self):
        response = self.client.get(f'/api/v1/accounts/{self.parent.id}/children/')
        self.assertEqual(len(response.data), 2)
        response = self.client.get(f'/api/v1/accounts/{self.parent.id}/children/?type=contact')
        self.assertEqual([a['name'] for a in response.data], ['Contact'])
        response = self.client.get(f'/api/v1/accounts/{self.parent.id}/children/?type=shipping')
        self.assertEqual([a['name'] for a in response.data], ['Warehouse'])

    def test_parents(self):
        response = self.client.get(f'/api/v1/accounts/{self.contact.id}/parents/')
        self.assertEqual([a['name'] for a in response.data], ['Parent'])
        response = self.client.get(f'/api/v1/accounts/{self.parent.id}/parents/')
        self.assertEqual(response.data, [])

    def test_account_assets(self):
        TestDataFactory.create_asset(self.company, account=self.parent)
        response = self.client.get(f'/api/v1/accounts/{self.parent.id}/assets/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
