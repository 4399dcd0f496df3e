"""Fixed-point money helpers shared by every report calculator.

All monetary accumulation uses :class:`decimal.Decimal`. Values are only
rounded when they are formatted for the wire, which keeps repeated
formatting stable.

Examples:
    >>> from decimal import Decimal
    >>> to_fixed2(Decimal("2.675"))
    '2.68'
    >>> to_fixed2(Decimal("-2.675"))
    '-2.68'
    >>> percent_of(Decimal("5"), Decimal("0"))
    Decimal('0')
    >>> parse_money(to_fixed2(Decimal("18")))
    Decimal('18.00')

"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: object) -> Decimal:
    """Coerce a stored amount into a Decimal.

    Args:
        value: Decimal, int, float, numeric string (thousands separators
            allowed) or None. NaN and None count as zero.

    Returns:
        Decimal value. Floats go through ``str()`` so ``0.1`` stays ``0.1``.

    Raises:
        ValueError: If a string is not numeric.

    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return ZERO if value.is_nan() else value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if math.isnan(value):
            return ZERO
        return Decimal(str(value))
    text = str(value).strip().replace(",", "")
    if not text:
        return ZERO
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise ValueError(f"Not a monetary amount: {value!r}") from e


def quantize(value: object) -> Decimal:
    """Round to cents, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_fixed2(value: object) -> str:
    """Format an amount with exactly two fractional digits.

    No thousands separator is used and negative zero is normalized, so
    ``to_fixed2(Decimal("-0.001"))`` is ``'0.00'``.
    """
    rounded = quantize(value)
    if rounded == ZERO:
        return "0.00"
    return f"{rounded:f}"


def parse_money(text: str) -> Decimal:
    """Parse a formatted amount back into a cent-precision Decimal."""
    return quantize(to_decimal(text))


def safe_divide(numerator: object, denominator: object) -> Decimal:
    """Divide, returning zero when the denominator is zero."""
    denominator = to_decimal(denominator)
    if denominator == ZERO:
        return ZERO
    return to_decimal(numerator) / denominator


def percent_of(part: object, whole: object) -> Decimal:
    """Return ``part`` as a percentage of ``whole`` (0 when whole is 0)."""
    whole = to_decimal(whole)
    if whole == ZERO:
        return ZERO
    return to_decimal(part) / whole * HUNDRED


def sum_money(values) -> Decimal:
    """Sum an iterable of amounts as Decimals."""
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return total
