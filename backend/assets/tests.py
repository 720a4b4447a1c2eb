"""
Test suite for Assets module
Tests: asset validation, company scoping and defaults
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient


class AssetAPITests(TestCase):
    """Test assets through the object endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(self.company, name='Router')
        self.account = TestDataFactory.create_account(self.company, self.user, name='Acme')

    def test_create_asset(self):
        response = self.client.post('/api/v1/assets/', {
            'name': 'Router #1', 'serial_number': '  SN-001 ', 'quantity': '1',
            'product': self.product.id, 'account': self.account.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['serial_number'], 'SN-001')
        self.assertEqual(response.data['install_status'], 'Planned')
        self.assertEqual(response.data['product_name'], 'Router')
        self.assertEqual(response.data['account_name'], 'Acme')

    def test_serial_number_required(self):
        response = self.client.post('/api/v1/assets/', {'name': 'No serial'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('serial_number', response.data['errors'])

    def test_negative_quantity_rejected(self):
        response = self.client.post('/api/v1/assets/', {'serial_number': 'SN-2', 'quantity': '-3'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('quantity', response.data['errors'])

    def test_invalid_install_status_rejected(self):
        response = self.client.post(
            '/api/v1/assets/', {'serial_number': 'SN-3', 'install_status': 'Lost'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_product_and_account_of_other_company_rejected(self):
        stranger = TestDataFactory.create_user()
        product = TestDataFactory.create_product(stranger.company)
        account = TestDataFactory.create_account(stranger.company, stranger)
        response = self.client.post('/api/v1/assets/', {
            'serial_number': 'SN-4', 'product': product.id, 'account': account.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('product', response.data['errors'])
        self.assertIn('account', response.data['errors'])

    def test_sort_by_serial_number(self):
        TestDataFactory.create_asset(self.company, serial_number='B-2', name='x')
        TestDataFactory.create_asset(self.company, serial_number='A-1', name='y')
        response = self.client.get('/api/v1/assets/?sortBy=serial_number')
        self.assertEqual([a['serial_number'] for a in response.data], ['A-1', 'B-2'])

    def test_update_asset(self):
        asset = TestDataFactory.create_asset(self.company)
        response = self.client.patch(f'/api/v1/assets/{asset.id}/', {'install_status': 'Installed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['install_status'], 'Installed')
