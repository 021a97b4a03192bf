"""Decimal arithmetic utilities for token amounts and rates.

Amounts travel as strings and are computed with Decimal. No float anywhere.
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

# Unsigned plain decimal: "5000", "0.25", ".5", "8.75"
_DECIMAL_RE = re.compile(r"^[0-9]*\.?[0-9]+$")

HUNDRED = Decimal(100)
DAYS_PER_YEAR = Decimal(365)

# Floor for working precision; matches the default context.
BASE_PRECISION = 28


def is_decimal_string(value: str) -> bool:
    return bool(_DECIMAL_RE.match(value))


def to_decimal_string(value: object) -> str:
    """Normalize an incoming amount (str or int) to its decimal string form.

    Raises ValueError for anything that is not an unsigned plain decimal.
    bool is rejected explicitly since it is an int subclass.
    """
    if isinstance(value, bool):
        raise ValueError("must be a decimal string")
    if isinstance(value, (int, Decimal)):
        value = str(value)
    elif isinstance(value, float):
        # repr() is the shortest round-tripping form, e.g. 8.5 -> "8.5"
        value = repr(value)
    if not isinstance(value, str):
        raise ValueError("must be a decimal string")
    text = value.strip()
    if not is_decimal_string(text):
        raise ValueError("must be a valid number")
    return text


def parse_decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as e:
        raise ValueError(f"not a decimal: {value!r}") from e


def quantize(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up to a fixed number of places: 1234.565 -> 1234.57.

    The context is widened to fit every integer digit of ``value``, so large
    amounts never raise InvalidOperation.
    """
    exp = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        if value.is_finite() and value:
            ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        return value.quantize(exp, rounding=ROUND_HALF_UP)


def working_precision(*operands: Decimal, places: int = 6) -> int:
    """Precision that keeps ``places`` decimals in products and quotients of ``operands``."""
    digits = sum(abs(v.adjusted()) + 1 for v in operands if v.is_finite() and v)
    return max(BASE_PRECISION, digits + places + 2)


def format_decimal(value: Decimal, places: int = 2) -> str:
    """Fixed-point string without exponent: Decimal('1E+3') -> '1000.00'."""
    return f"{quantize(value, places):f}"
