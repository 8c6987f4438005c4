from decimal import Decimal

import pytest

from src.service.order.domain.value_object.price_breakdown import calculate_total, round2


@pytest.mark.unit
@pytest.mark.parametrize(
    'prices,subtotal,tax,total',
    [
        ([100, 250], '350.00', '17.50', '367.50'),
        ([Decimal('100.00'), Decimal('100.00')], '200.00', '10.00', '210.00'),
        ([], '0.00', '0.00', '0.00'),
        ([0.1, 0.2], '0.30', '0.02', '0.32'),
        (['33.33'], '33.33', '1.67', '35.00'),
    ],
)
def test_calculate_total(prices, subtotal, tax, total):
    breakdown = calculate_total(prices, tax_rate=Decimal('0.05'))

    assert breakdown.subtotal == Decimal(subtotal)
    assert breakdown.tax == Decimal(tax)
    assert breakdown.total == Decimal(total)


@pytest.mark.unit
def test_round2_is_half_up():
    assert round2(Decimal('0.125')) == Decimal('0.13')
    assert round2(Decimal('0.124')) == Decimal('0.12')
