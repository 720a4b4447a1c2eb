"""
Test suite for Quotes module
Tests: line pricing, quote totals, customer/seller snapshots and the quote line endpoints
"""
from decimal import Decimal

from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.quotes.models import Quote, QuoteLine
from backend.quotes.pricing import calculate_line, resolve_discount


class PricingTests(SimpleTestCase):
    """Test quote line price calculation"""

    def test_percent_discounts(self):
        result = calculate_line(
            product_unit_price='100', quoted_quantity='2',
            unit_price_discount_percent='10', discount_percent_on_subtotal='10', vat_percent='20',
        )
        self.assertEqual(result['quote_unit_price'], Decimal('100'))
        self.assertEqual(result['unit_price_discount_amount'], Decimal('10'))
        self.assertEqual(result['final_unit_price'], Decimal('90'))
        self.assertEqual(result['subtotal_before_row_discounts'], Decimal('180'))
        self.assertEqual(result['discount_amount_on_subtotal'], Decimal('18'))
        self.assertEqual(result['final_subtotal'], Decimal('162'))
        self.assertEqual(result['vat_unit_amount'], Decimal('18'))
        self.assertEqual(result['vat_on_subtotal'], Decimal('36'))
        self.assertEqual(result['gross_subtotal'], Decimal('198'))

    def test_override_replaces_product_price(self):
        result = calculate_line(product_unit_price='100', product_unit_price_override='80', quoted_quantity='1')
        self.assertEqual(result['quote_unit_price'], Decimal('80'))
        self.assertEqual(result['final_subtotal'], Decimal('80'))

    def test_amount_wins_over_percent(self):
        percent, amount = resolve_discount(Decimal('200'), percent=Decimal('50'), amount=Decimal('20'))
        self.assertEqual(amount, Decimal('20.00000'))
        self.assertEqual(percent, Decimal('10.00000'))

    def test_amount_on_zero_base_gives_zero_percent(self):
        percent, amount = resolve_discount(Decimal('0'), amount=Decimal('5'))
        self.assertEqual(percent, Decimal('0'))
        self.assertEqual(amount, Decimal('5'))

    def test_results_have_five_decimal_places(self):
        result = calculate_line(product_unit_price='10', quoted_quantity='3', unit_price_discount_percent='33.333333')
        self.assertEqual(result['unit_price_discount_amount'], Decimal('3.33333'))
        self.assertEqual(result['unit_price_discount_amount'].as_tuple().exponent, -5)

    def test_percent_basis_rebuilds_stored_amount(self):
        percent, amount = resolve_discount(
            Decimal('200'), percent=Decimal('10'), amount=Decimal('10'), basis='percent'
        )
        self.assertEqual(percent, Decimal('10.00000'))
        self.assertEqual(amount, Decimal('20.00000'))

    def test_basis_inferred_from_given_side(self):
        result = calculate_line(product_unit_price='100', quoted_quantity='1', discount_amount_on_subtotal='5')
        self.assertEqual(result['subtotal_discount_basis'], 'amount')
        self.assertEqual(result['unit_price_discount_basis'], '')
        result = calculate_line(product_unit_price='100', quoted_quantity='1', unit_price_discount_percent='5')
        self.assertEqual(result['unit_price_discount_basis'], 'percent')

    def test_missing_values_count_as_zero(self):
        result = calculate_line()
        self.assertEqual(result['gross_subtotal'], Decimal('0'))


class QuoteModelTests(TestCase):
    """Test quote line pricing on save and quote totals"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.product = TestDataFactory.create_product(self.company, sales_unit_price=Decimal('50'), vat_percent=Decimal('10'))
        self.quote = TestDataFactory.create_quote(self.company)

    def test_line_save_applies_pricing(self):
        line = TestDataFactory.create_quote_line(self.quote, product=self.product, quoted_quantity=Decimal('4'))
        line.refresh_from_db()
        self.assertEqual(line.final_subtotal, Decimal('200'))
        self.assertEqual(line.vat_on_subtotal, Decimal('20'))
        self.assertEqual(line.gross_subtotal, Decimal('220'))

    def test_totals_sum_lines(self):
        TestDataFactory.create_quote_line(self.quote, product=self.product, quoted_quantity=Decimal('1'))
        TestDataFactory.create_quote_line(self.quote, product=self.product, quoted_quantity=Decimal('2'))
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('150'))
        self.assertEqual(self.quote.gross_grand_total, Decimal('165'))

    def test_totals_of_empty_quote_are_zero(self):
        self.quote.recalculate_totals()
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('0'))


class QuoteAPITests(TestCase):
    """Test quote creation through the generic object endpoints"""

    def setUp(self):
        self.company = TestDataFactory.create_company(name='Seller Ltd', bank_account_number='DE89370400440532013000')
        self.user = TestDataFactory.create_user(company=self.company, email='seller@test.com')
        self.user.phone = '+44 20 7946 0000'
        self.user.save()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_account(
            self.company, self.user, name='Buyer GmbH',
            address_city='Berlin', address_country='Germany',
        )

    def test_create_quote_snapshots_customer_and_seller(self):
        response = self.client.post('/api/v1/quotes/', {'name': 'Q-1', 'customer': self.customer.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['customer_name'], 'Buyer GmbH')
        self.assertEqual(response.data['customer_address_city'], 'Berlin')
        self.assertEqual(response.data['seller_name'], 'Seller Ltd')
        self.assertEqual(response.data['seller_bank_account'], 'DE89370400440532013000')
        self.assertEqual(response.data['seller_email'], 'seller@test.com')
        self.assertEqual(response.data['seller_phone'], '+44 20 7946 0000')
        self.assertEqual(response.data['created_by'], self.user.id)

    def test_blank_customer_and_expiration_become_null(self):
        response = self.client.post(
            '/api/v1/quotes/', {'name': 'Q-2', 'customer': '', 'quote_expiration_date': ''}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['customer'])
        self.assertIsNone(response.data['quote_expiration_date'])

    def test_customer_of_other_company_rejected(self):
        other_user = TestDataFactory.create_user()
        foreign = TestDataFactory.create_account(other_user.company, other_user)
        response = self.client.post('/api/v1/quotes/', {'name': 'Q-3', 'customer': foreign.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_account_quotes_endpoint(self):
        TestDataFactory.create_quote(self.company, customer=self.customer)
        response = self.client.get(f'/api/v1/accounts/{self.customer.id}/quotes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)


class QuoteLineAPITests(TestCase):
    """Test quote line endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.uom = TestDataFactory.create_unit_of_measure(self.company, uom_name='Hour', type='Time')
        self.product = TestDataFactory.create_product(
            self.company, name='Consulting', sales_unit_price=Decimal('100'),
            vat_percent=Decimal('20'), sales_uom=self.uom,
        )
        self.quote = TestDataFactory.create_quote(self.company, name='Q-100')

    def test_create_line_fills_from_product(self):
        response = self.client.post(
            f'/api/v1/quotes/{self.quote.id}/quote-lines/',
            {'product': self.product.id, 'quoted_quantity': '2'}, format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Consulting')
        self.assertEqual(response.data['sales_uom'], 'Hour')
        self.assertEqual(response.data['unit_price_currency'], 'EUR')
        self.assertEqual(response.data['quote_name'], 'Q-100')
        self.assertEqual(Decimal(response.data['gross_subtotal']), Decimal('240'))
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('200'))
        self.assertEqual(self.quote.gross_grand_total, Decimal('240'))

    def test_list_lines(self):
        TestDataFactory.create_quote_line(self.quote, product=self.product)
        response = self.client.get(f'/api/v1/quotes/{self.quote.id}/quote-lines/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_lines_of_foreign_quote_not_found(self):
        other_user = TestDataFactory.create_user()
        foreign_quote = TestDataFactory.create_quote(other_user.company)
        response = self.client.get(f'/api/v1/quotes/{foreign_quote.id}/quote-lines/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_line_recalculates_totals(self):
        line = TestDataFactory.create_quote_line(self.quote, product=self.product)
        response = self.client.patch(f'/api/v1/quote-lines/{line.id}/', {'quoted_quantity': '3'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('300'))

    def test_new_percent_replaces_stored_discount_amount(self):
        line = TestDataFactory.create_quote_line(
            self.quote, product=self.product, unit_price_discount_percent=Decimal('10')
        )
        response = self.client.patch(
            f'/api/v1/quote-lines/{line.id}/', {'unit_price_discount_percent': '25'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['unit_price_discount_amount']), Decimal('25'))
        self.assertEqual(Decimal(response.data['final_unit_price']), Decimal('75'))

    def test_quantity_change_keeps_row_discount_percent(self):
        response = self.client.post(
            f'/api/v1/quotes/{self.quote.id}/quote-lines/',
            {'product_unit_price': '100', 'quoted_quantity': '1', 'vat_percent': '0',
             'discount_percent_on_subtotal': '10'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Decimal(response.data['discount_amount_on_subtotal']), Decimal('10'))

        response = self.client.patch(
            f"/api/v1/quote-lines/{response.data['id']}/", {'quoted_quantity': '2'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['subtotal_before_row_discounts']), Decimal('200'))
        self.assertEqual(Decimal(response.data['discount_percent_on_subtotal']), Decimal('10'))
        self.assertEqual(Decimal(response.data['discount_amount_on_subtotal']), Decimal('20'))
        self.assertEqual(Decimal(response.data['final_subtotal']), Decimal('180'))

    def test_override_change_keeps_unit_discount_percent(self):
        line = TestDataFactory.create_quote_line(
            self.quote, product=self.product, unit_price_discount_percent=Decimal('10')
        )
        response = self.client.patch(
            f'/api/v1/quote-lines/{line.id}/', {'product_unit_price_override': '50'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['unit_price_discount_percent']), Decimal('10'))
        self.assertEqual(Decimal(response.data['unit_price_discount_amount']), Decimal('5'))
        self.assertEqual(Decimal(response.data['final_unit_price']), Decimal('45'))

    def test_amount_discount_stays_fixed_on_quantity_change(self):
        line = TestDataFactory.create_quote_line(
            self.quote, product=self.product, discount_amount_on_subtotal=Decimal('10')
        )
        response = self.client.patch(f'/api/v1/quote-lines/{line.id}/', {'quoted_quantity': '2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['discount_amount_on_subtotal']), Decimal('10'))
        self.assertEqual(Decimal(response.data['discount_percent_on_subtotal']), Decimal('5'))
        self.assertEqual(response.data['subtotal_discount_basis'], 'amount')

    def test_quote_of_line_cannot_change(self):
        line = TestDataFactory.create_quote_line(self.quote, product=self.product)
        other_quote = TestDataFactory.create_quote(self.company)
        response = self.client.patch(f'/api/v1/quote-lines/{line.id}/', {'quote': other_quote.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        line.refresh_from_db()
        self.assertEqual(line.quote_id, self.quote.id)

    def test_delete_line_recalculates_totals(self):
        line = TestDataFactory.create_quote_line(self.quote, product=self.product)
        response = self.client.delete(f'/api/v1/quote-lines/{line.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('0'))

    def test_line_of_other_company_not_found(self):
        other_user = TestDataFactory.create_user()
        foreign_line = TestDataFactory.create_quote_line(TestDataFactory.create_quote(other_user.company))
        response = self.client.get(f'/api/v1/quote-lines/{foreign_line.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Quote line not found')

    def test_product_of_other_company_rejected(self):
        other_user = TestDataFactory.create_user()
        foreign_product = TestDataFactory.create_product(other_user.company)
        response = self.client.post(
            f'/api/v1/quotes/{self.quote.id}/quote-lines/', {'product': foreign_product.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class QuoteLineBatchTests(TestCase):
    """Test batch save and delete of quote lines"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.company = self.user.company
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.product = TestDataFactory.create_product(self.company, sales_unit_price=Decimal('10'), vat_percent=Decimal('0'))
        self.quote = TestDataFactory.create_quote(self.company)
        self.url = f'/api/v1/quotes/{self.quote.id}/quote-lines/batch/'

    def test_batch_creates_and_updates(self):
        existing = TestDataFactory.create_quote_line(self.quote, product=self.product)
        response = self.client.post(self.url, {'lines': [
            {'id': existing.id, 'quoted_quantity': '5'},
            {'product': self.product.id, 'quoted_quantity': '2'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)
        self.assertEqual(self.quote.lines.count(), 2)
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('70'))

    def test_batch_requires_lines_array(self):
        response = self.client.post(self.url, {'lines': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], "Request body must contain 'lines' array")

    def test_non_integer_line_id_names_line(self):
        response = self.client.post(self.url, {'lines': [
            {'id': 'abc', 'quoted_quantity': '1'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid data in line 1')
        self.assertIn('id', response.data['errors'])
        self.assertEqual(self.quote.lines.count(), 0)

    def test_array_body_rejected(self):
        response = self.client.post(self.url, [{'product': self.product.id}], format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], "Request body must contain 'lines' array")
        response = self.client.delete(self.url, [1, 2], format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], "Request body must contain 'ids' array")

    def test_batch_delete_non_integer_ids_rejected(self):
        line = TestDataFactory.create_quote_line(self.quote, product=self.product)
        response = self.client.delete(self.url, {'ids': [line.id, 'abc']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Line ids must be integers')
        self.assertTrue(QuoteLine.objects.filter(pk=line.id).exists())

    def test_invalid_line_rolls_back_batch(self):
        response = self.client.post(self.url, {'lines': [
            {'product': self.product.id, 'quoted_quantity': '1'},
            {'product': self.product.id, 'quoted_quantity': 'abc'},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid data in line 2')
        self.assertEqual(self.quote.lines.count(), 0)

    def test_quote_forced_from_url(self):
        other_quote = TestDataFactory.create_quote(self.company)
        response = self.client.post(self.url, {'lines': [
            {'product': self.product.id, 'quote': other_quote.id},
        ]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(QuoteLine.objects.get().quote_id, self.quote.id)

    def test_batch_update_keeps_discount_percent(self):
        line = TestDataFactory.create_quote_line(
            self.quote, product=self.product, discount_percent_on_subtotal=Decimal('10')
        )
        response = self.client.post(self.url, {'lines': [{'id': line.id, 'quoted_quantity': '3'}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        line.refresh_from_db()
        self.assertEqual(line.discount_percent_on_subtotal, Decimal('10'))
        self.assertEqual(line.discount_amount_on_subtotal, Decimal('3'))
        self.assertEqual(line.final_subtotal, Decimal('27'))

    def test_batch_delete(self):
        first = TestDataFactory.create_quote_line(self.quote, product=self.product)
        second = TestDataFactory.create_quote_line(self.quote, product=self.product)
        response = self.client.delete(self.url, {'ids': [first.id, second.id]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted_count'], 2)
        self.quote.refresh_from_db()
        self.assertEqual(self.quote.net_grand_total, Decimal('0'))

    def test_batch_delete_ignores_lines_of_other_quotes(self):
        other_quote = TestDataFactory.create_quote(self.company)
        line = TestDataFactory.create_quote_line(other_quote, product=self.product)
        response = self.client.delete(self.url, {'ids': [line.id]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(QuoteLine.objects.filter(pk=line.id).exists())

    def test_batch_on_foreign_quote_not_found(self):
        other_user = TestDataFactory.create_user()
        foreign_quote = TestDataFactory.create_quote(other_user.company)
        response = self.client.post(
            f'/api/v1/quotes/{foreign_quote.id}/quote-lines/batch/', {'lines': []}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(Quote.objects.filter(pk=foreign_quote.id).count(), 1)
