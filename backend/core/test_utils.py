"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.core.models import Company
from backend.accounts.models import Account
from backend.products.models import UnitOfMeasure, Product
from backend.assets.models import Asset
from backend.quotes.models import Quote, QuoteLine
from backend.metadata.models import FieldDefinition, ObjectLayout
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_company(name=None, **extra):
        """Create a test company"""
        if not name:
            name = f'Company_{TestDataFactory.random_string(6)}'
        extra.setdefault('bank_account_number', 'GB00TEST12345678')
        extra.setdefault('address', f'1 {name} Street')
        return Company.objects.create(company_official_name=name, **extra)

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', company=None,
                    is_company_admin=False, is_global_admin=False, is_superuser=False):
        """Create a test user; a new company is created when none is given"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        if company is None:
            company = TestDataFactory.create_company()
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            company=company,
            is_company_admin=is_company_admin,
            is_global_admin=is_global_admin,
            is_superuser=is_superuser,
        )
        return user

    @staticmethod
    def create_account(company, owner, name=None, **extra):
        """Create a test account"""
        if not name:
            name = f'Account_{TestDataFactory.random_string(6)}'
        return Account.objects.create(company=company, owner=owner, name=name, **extra)

    @staticmethod
    def create_unit_of_measure(company, uom_name='Piece', type='Quantity', base_to_type=True):
        """Create a test unit of measure"""
        return UnitOfMeasure.objects.create(company=company, uom_name=uom_name, type=type, base_to_type=base_to_type)

    @staticmethod
    def create_product(company, name=None, sales_unit_price=None, vat_percent=None, sales_uom=None,
                       currency='EUR', **extra):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if sales_unit_price is None:
            sales_unit_price = Decimal('100.00')
        if vat_percent is None:
            vat_percent = Decimal('20')
        return Product.objects.create(
            company=company,
            name=name,
            sales_unit_price=sales_unit_price,
            sales_unit_price_currency=currency,
            vat_percent=vat_percent,
            sales_uom=sales_uom,
            **extra
        )

    @staticmethod
    def create_asset(company, serial_number=None, product=None, account=None, **extra):
        """Create a test asset"""
        if not serial_number:
            serial_number = f'SN-{TestDataFactory.random_string(8)}'
        extra.setdefault('name', f'Asset {serial_number}')
        return Asset.objects.create(
            company=company, serial_number=serial_number, product=product, account=account, **extra
        )

    @staticmethod
    def create_quote(company, name=None, customer=None, **extra):
        """Create a test quote"""
        if not name:
            name = f'Quote_{TestDataFactory.random_string(6)}'
        return Quote.objects.create(company=company, name=name, customer=customer, **extra)

    @staticmethod
    def create_quote_line(quote, product=None, quoted_quantity=None, product_unit_price=None, **extra):
        """Create a test quote line; prices default to the product's"""
        if quoted_quantity is None:
            quoted_quantity = Decimal('1')
        if product is not None:
            if product_unit_price is None:
                product_unit_price = product.sales_unit_price
            extra.setdefault('vat_percent', product.vat_percent)
            extra.setdefault('name', product.name)
        line = QuoteLine.objects.create(
            quote=quote,
            quote_name=quote.name,
            product=product,
            quoted_quantity=quoted_quantity,
            product_unit_price=product_unit_price,
            **extra
        )
        quote.recalculate_totals()
        return line

    @staticmethod
    def create_field_definition(object_code, api_code, type='TextField', company=None, label=None, **extra):
        """Create a field definition; standard when no company is given"""
        return FieldDefinition.objects.create(
            object_code=object_code,
            api_code=api_code,
            type=type,
            company=company,
            label=label or api_code.replace('_', ' ').title(),
            **extra
        )

    @staticmethod
    def create_layout(object_code, view_type, definition=None, company=None, name=None):
        """Create a table or detail layout"""
        if definition is None:
            if view_type == 'table':
                definition = {'columns': ['name']}
            else:
                definition = {'sections': [{'label': 'Details', 'fields': ['name']}]}
        return ObjectLayout.objects.create(
            object_code=object_code,
            view_type=view_type,
            definition=definition,
            company=company,
            name=name or f'{object_code} {view_type}',
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
