from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

import attrs


_CENTS = Decimal('0.01')


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENTS, rounding=ROUND_HALF_UP)


@attrs.frozen
class PriceBreakdown:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def calculate_total(
    prices: Iterable[Union[Decimal, int, float, str]], *, tax_rate: Decimal
) -> PriceBreakdown:
    """
    subtotal = sum(prices), tax = round2(subtotal * tax_rate), total = round2(subtotal + tax)

    Floats are converted through str so 0.1 stays 0.1.
    """
    subtotal = round2(sum((Decimal(str(price)) for price in prices), Decimal('0')))
    tax = round2(subtotal * tax_rate)
    return PriceBreakdown(subtotal=subtotal, tax=tax, total=round2(subtotal + tax))
