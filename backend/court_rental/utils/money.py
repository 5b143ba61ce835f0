# court_rental/utils/money.py

from decimal import Decimal, ROUND_HALF_UP
from typing import Union

Number = Union[int, float, Decimal]


def D(x) -> Decimal:
    return x if isinstance(x, Decimal) else Decimal(str(x or "0"))


def round_naira(x: Number) -> int:
    """Round to whole Naira, halves away from zero."""
    return int(D(x).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_number(x: Number) -> str:
    value = D(x)
    if value == value.to_integral_value():
        return f"{int(value):,}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def format_naira(x: Number) -> str:
    return f"NGN {format_number(x)}"
