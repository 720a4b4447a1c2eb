from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Sum
from django.db.models.functions import Coalesce
from backend.core.models import Company
from .pricing import BASIS_AMOUNT, BASIS_PERCENT, calculate_line

AMOUNT = {'max_digits': 17, 'decimal_places': 5}
DISCOUNT_BASIS_CHOICES = [
    (BASIS_PERCENT, 'Percent'),
    (BASIS_AMOUNT, 'Amount'),
]


class Quote(models.Model):
    """Sales quote with customer and seller details captured at creation"""
    name = models.CharField(max_length=255)
    customer = models.ForeignKey('accounts.Account', on_delete=models.PROTECT, null=True, blank=True, related_name='quotes')
    customer_name = models.CharField(max_length=255, blank=True)
    customer_address = models.TextField(blank=True)
    customer_address_street_address = models.CharField(max_length=255, blank=True)
    customer_address_city = models.CharField(max_length=100, blank=True)
    customer_address_state_province = models.CharField(max_length=100, blank=True)
    customer_address_zip_code = models.CharField(max_length=20, blank=True)
    customer_address_country = models.CharField(max_length=100, blank=True)
    seller_name = models.CharField(max_length=255, blank=True)
    seller_address = models.TextField(blank=True)
    seller_bank_account = models.CharField(max_length=100, blank=True)
    seller_user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='sold_quotes')
    seller_email = models.EmailField(blank=True)
    seller_phone = models.CharField(max_length=50, blank=True)
    quote_expiration_date = models.DateField(null=True, blank=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='created_quotes')
    net_grand_total = models.DecimalField(default=Decimal('0'), **AMOUNT)
    gross_grand_total = models.DecimalField(default=Decimal('0'), **AMOUNT)
    company = models.ForeignKey(Company, on_delete=models.CASCADE, related_name='quotes')
    custom_fields = models.JSONField(default=dict, blank=True)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    def recalculate_totals(self):
        """Net and gross grand totals from the quote's lines"""
        totals = self.lines.aggregate(
            net=Coalesce(Sum('final_subtotal'), Decimal('0'), output_field=models.DecimalField(**AMOUNT)),
            gross=Coalesce(Sum('gross_subtotal'), Decimal('0'), output_field=models.DecimalField(**AMOUNT)),
        )
        self.net_grand_total = totals['net']
        self.gross_grand_total = totals['gross']
        self.save(update_fields=['net_grand_total', 'gross_grand_total'])

    class Meta:
        db_table = 'quotes'
        ordering = ['-created_date']


class QuoteLine(models.Model):
    """Priced line of a quote; derived amounts are recomputed on every save"""
    quote = models.ForeignKey(Quote, on_delete=models.CASCADE, related_name='lines')
    quote_name = models.CharField(max_length=255, blank=True)
    product = models.ForeignKey('products.Product', on_delete=models.PROTECT, null=True, blank=True, related_name='quote_lines')
    name = models.CharField(max_length=255, blank=True)
    product_unit_price = models.DecimalField(null=True, blank=True, **AMOUNT)
    unit_price_currency = models.CharField(max_length=3, blank=True)
    product_unit_price_override = models.DecimalField(null=True, blank=True, **AMOUNT)
    quote_unit_price = models.DecimalField(default=Decimal('0'), **AMOUNT)
    unit_price_discount_percent = models.DecimalField(null=True, blank=True, **AMOUNT)
    unit_price_discount_amount = models.DecimalField(null=True, blank=True, **AMOUNT)
    unit_price_discount_basis = models.CharField(max_length=10, choices=DISCOUNT_BASIS_CHOICES, blank=True)
    final_unit_price = models.DecimalField(default=Decimal('0'), **AMOUNT)
    sales_uom = models.CharField(max_length=100, blank=True)
    quoted_quantity = models.DecimalField(default=Decimal('1'), **AMOUNT)
    subtotal_before_row_discounts = models.DecimalField(default=Decimal('0'), **AMOUNT)
    discount_percent_on_subtotal = models.DecimalField(null=True, blank=True, **AMOUNT)
    discount_amount_on_subtotal = models.DecimalField(null=True, blank=True, **AMOUNT)
    subtotal_discount_basis = models.CharField(max_length=10, choices=DISCOUNT_BASIS_CHOICES, blank=True)
    final_subtotal = models.DecimalField(default=Decimal('0'), **AMOUNT)
    vat_percent = models.DecimalField(null=True, blank=True, **AMOUNT)
    vat_unit_amount = models.DecimalField(default=Decimal('0'), **AMOUNT)
    vat_on_subtotal = models.DecimalField(default=Decimal('0'), **AMOUNT)
    gross_subtotal = models.DecimalField(default=Decimal('0'), **AMOUNT)
    created_date = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name or f"Line {self.pk}"

    def apply_pricing(self):
        for field, value in calculate_line(
            product_unit_price=self.product_unit_price,
            quoted_quantity=self.quoted_quantity,
            product_unit_price_override=self.product_unit_price_override,
            unit_price_discount_percent=self.unit_price_discount_percent,
            unit_price_discount_amount=self.unit_price_discount_amount,
            discount_percent_on_subtotal=self.discount_percent_on_subtotal,
            discount_amount_on_subtotal=self.discount_amount_on_subtotal,
            vat_percent=self.vat_percent,
            unit_price_discount_basis=self.unit_price_discount_basis,
            subtotal_discount_basis=self.subtotal_discount_basis,
        ).items():
            setattr(self, field, value)

    def save(self, *args, **kwargs):
        self.apply_pricing()
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'quote_lines'
        ordering = ['id']
