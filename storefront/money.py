"""
Exact-precision money helpers

Amounts travel as two-decimal strings ("44.98") and are handled as
``Decimal`` in between. Floats are never used for arithmetic.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal('0.01')

# Largest value a Numeric(10, 2) column holds
MAX_AMOUNT = Decimal('99999999.99')


def _as_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise ValueError(f'Invalid amount: {value!r}')
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValueError(f'Invalid amount: {value!r}') from e
    if not amount.is_finite():
        raise ValueError(f'Invalid amount: {value!r}')
    return amount


def to_decimal(value) -> Decimal:
    """Parse a price-like value into a Decimal quantized to cents.

    Floats are converted through ``str`` so that 19.99 becomes
    Decimal('19.99') rather than its binary approximation.
    """
    return _as_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value) -> Decimal:
    """Parse an incoming amount without rounding it.

    Rejects sub-cent precision, negative values and anything that does
    not fit the money columns.
    """
    amount = _as_decimal(value)
    if amount != amount.quantize(CENT, rounding=ROUND_HALF_UP):
        raise ValueError(f'Amount has more than two decimal places: {value!r}')
    if amount < 0:
        raise ValueError(f'Amount must not be negative: {value!r}')
    if amount > MAX_AMOUNT:
        raise ValueError(f'Amount exceeds {MAX_AMOUNT}: {value!r}')
    return amount.quantize(CENT)


def format_money(amount):
    if amount is None:
        return None
    return str(to_decimal(amount))
