"""
Quote line price calculation.

All amounts are Decimals quantised to 5 decimal places, matching the
(17, 5) columns they are stored in.
"""
from decimal import Decimal, ROUND_HALF_UP

AMOUNT_PLACES = Decimal('0.00001')
ZERO = Decimal('0')
HUNDRED = Decimal('100')

BASIS_PERCENT = 'percent'
BASIS_AMOUNT = 'amount'


def to_decimal(value):
    if value is None or value == '':
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value):
    return value.quantize(AMOUNT_PLACES, rounding=ROUND_HALF_UP)


def discount_basis(percent=None, amount=None, basis=None):
    """Which side of a discount pair the other is derived from"""
    if basis in (BASIS_PERCENT, BASIS_AMOUNT):
        return basis
    if to_decimal(amount):
        return BASIS_AMOUNT
    if to_decimal(percent):
        return BASIS_PERCENT
    return ''


def resolve_discount(base, percent=None, amount=None, basis=None):
    """
    (percent, amount) of a discount applied to ``base``.

    With a percent basis the amount is rebuilt from the percent, so the
    discount follows changes to the base. Otherwise a given amount wins and
    the percent is derived from it (0 when base is 0).
    """
    basis = discount_basis(percent, amount, basis)
    base = to_decimal(base)
    percent = to_decimal(percent)
    amount = to_decimal(amount)
    if basis == BASIS_AMOUNT:
        percent = amount / base * HUNDRED if base else ZERO
    elif basis == BASIS_PERCENT:
        amount = base * percent / HUNDRED
    return quantize(percent), quantize(amount)


def calculate_line(product_unit_price=None, quoted_quantity=None, product_unit_price_override=None,
                   unit_price_discount_percent=None, unit_price_discount_amount=None,
                   discount_percent_on_subtotal=None, discount_amount_on_subtotal=None,
                   vat_percent=None, unit_price_discount_basis=None, subtotal_discount_basis=None):
    """Derived price fields of a quote line"""
    if product_unit_price_override is not None and product_unit_price_override != '':
        quote_unit_price = to_decimal(product_unit_price_override)
    else:
        quote_unit_price = to_decimal(product_unit_price)
    quantity = to_decimal(quoted_quantity)

    unit_basis = discount_basis(unit_price_discount_percent, unit_price_discount_amount, unit_price_discount_basis)
    unit_percent, unit_amount = resolve_discount(
        quote_unit_price, unit_price_discount_percent, unit_price_discount_amount, unit_basis
    )
    final_unit_price = quote_unit_price - unit_amount
    subtotal = quantity * final_unit_price

    row_basis = discount_basis(discount_percent_on_subtotal, discount_amount_on_subtotal, subtotal_discount_basis)
    row_percent, row_amount = resolve_discount(
        subtotal, discount_percent_on_subtotal, discount_amount_on_subtotal, row_basis
    )
    final_subtotal = subtotal - row_amount

    vat_unit_amount = final_unit_price * to_decimal(vat_percent) / HUNDRED
    vat_on_subtotal = vat_unit_amount * quantity

    return {
        'quote_unit_price': quantize(quote_unit_price),
        'unit_price_discount_percent': unit_percent,
        'unit_price_discount_amount': unit_amount,
        'unit_price_discount_basis': unit_basis,
        'final_unit_price': quantize(final_unit_price),
        'subtotal_before_row_discounts': quantize(subtotal),
        'discount_percent_on_subtotal': row_percent,
        'discount_amount_on_subtotal': row_amount,
        'subtotal_discount_basis': row_basis,
        'final_subtotal': quantize(final_subtotal),
        'vat_unit_amount': quantize(vat_unit_amount),
        'vat_on_subtotal': quantize(vat_on_subtotal),
        'gross_subtotal': quantize(final_subtotal + vat_on_subtotal),
    }
