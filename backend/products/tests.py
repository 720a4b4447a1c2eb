"""
Test suite for Products module
Tests: units of measure, product validation and delete guards
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.products.models import UnitOfMeasure, Product


class UnitOfMeasureAPITests(TestCase):
    """Test unit of measure endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_unit(self):
        response = self.client.post(
            '/api/v1/unit-of-measures/', {'type': 'Time', 'uom_name': 'Hour', 'base_to_type': True}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(UnitOfMeasure.objects.get(pk=response.data['id']).company_id, self.company.id)

    def test_filter_by_type(self):
        TestDataFactory.create_unit_of_measure(self.company, uom_name='Hour', type='Time')
        TestDataFactory.create_unit_of_measure(self.company, uom_name='Piece', type='Quantity')
        response = self.client.get('/api/v1/unit-of-measures/?type=Time')
        self.assertEqual([u['uom_name'] for u in response.data], ['Hour'])

    def test_unit_of_other_company_not_found(self):
        stranger = TestDataFactory.create_user()
        unit = TestDataFactory.create_unit_of_measure(stranger.company)
        response = self.client.get(f'/api/v1/unit-of-measures/{unit.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Unit of measure not found')

    def test_delete_refused_while_used(self):
        unit = TestDataFactory.create_unit_of_measure(self.company)
        TestDataFactory.create_product(self.company, sales_uom=unit)
        response = self.client.delete(f'/api/v1/unit-of-measures/{unit.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete unit of measure used by products')

    def test_delete_unused_unit(self):
        unit = TestDataFactory.create_unit_of_measure(self.company)
        response = self.client.delete(f'/api/v1/unit-of-measures/{unit.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)


class ProductAPITests(TestCase):
    """Test products through the object endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.unit = TestDataFactory.create_unit_of_measure(self.company)

    def test_create_product(self):
        response = self.client.post('/api/v1/products/', {
            'name': 'Widget', 'sales_uom': self.unit.id, 'sales_unit_price': '12.50',
            'sales_unit_price_currency': 'usd', 'vat_percent': '19',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['sales_unit_price_currency'], 'USD')
        self.assertEqual(response.data['sales_uom_name'], 'Piece')
        self.assertEqual(Decimal(response.data['sales_unit_price']), Decimal('12.5'))

    def test_unit_of_other_company_rejected(self):
        stranger = TestDataFactory.create_user()
        unit = TestDataFactory.create_unit_of_measure(stranger.company)
        response = self.client.post('/api/v1/products/', {'name': 'Widget', 'sales_uom': unit.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sales_uom', response.data['errors'])

    def test_negative_price_and_vat_range(self):
        response = self.client.post(
            '/api/v1/products/', {'name': 'Widget', 'sales_unit_price': '-1', 'vat_percent': '101'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sales_unit_price', response.data['errors'])
        self.assertIn('vat_percent', response.data['errors'])

    def test_delete_refused_with_quote_lines(self):
        product = TestDataFactory.create_product(self.company)
        TestDataFactory.create_quote_line(TestDataFactory.create_quote(self.company), product=product)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete product used in quote lines')

    def test_delete_refused_with_assets(self):
        product = TestDataFactory.create_product(self.company)
        TestDataFactory.create_asset(self.company, product=product)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete product with assets')

    def test_delete_product(self):
        product = TestDataFactory.create_product(self.company)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(pk=product.id).exists())
