"""
Display formatting helpers shared by listings and printed labels
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from django.conf import settings


TWO_PLACES = Decimal('0.01')


def to_decimal(amount):
    """Convert int/float/str/Decimal to Decimal, raising ValueError on bad input"""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, bool):
        raise ValueError(f"Invalid amount: {amount!r}")
    try:
        # str() first so floats keep their shortest repr (0.1 -> 0.1, not 0.1000000000000000055...)
        value = Decimal(str(amount).strip())
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    return value


def format_currency(amount, symbol=None):
    """
    Format an amount for display, e.g. 1234.5 -> "₹1,234.50".

    Missing amounts (None) are shown as "N/A". Negative amounts get a leading
    minus sign before the symbol ("-₹10.00").
    """
    if amount is None:
        return 'N/A'

    if symbol is None:
        symbol = getattr(settings, 'CURRENCY_SYMBOL', '₹')

    value = to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    sign = '-' if value < 0 else ''
    return f"{sign}{symbol}{abs(value):,.2f}"
