from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.service.order.app.dto.inventory_dto import Reservation
from src.service.order.app.dto.payment_dto import PaymentResult
from src.service.order.app.service.order_saga_coordinator import OrderSagaCoordinator
from test.service.order.unit.in_memory_order_repo import InMemoryOrderRepo


@pytest.fixture
def order_repo() -> InMemoryOrderRepo:
    return InMemoryOrderRepo()


@pytest.fixture
def inventory_client() -> AsyncMock:
    client = AsyncMock()
    client.reserve = AsyncMock(
        return_value=Reservation(hold_ids=['h1', 'h2'], expires_at='2026-01-01T00:15:00+00:00')
    )
    client.quote_prices = AsyncMock(return_value=[Decimal('100.00'), Decimal('100.00')])
    client.allocate = AsyncMock(return_value=None)
    client.release = AsyncMock(return_value=None)
    return client


@pytest.fixture
def payment_client() -> AsyncMock:
    client = AsyncMock()
    client.charge = AsyncMock(return_value=PaymentResult(payment_id='pay_1', status='SUCCESS'))
    client.refund = AsyncMock(return_value=PaymentResult(payment_id='pay_1', status='REFUNDED'))
    return client


@pytest.fixture
def coordinator(order_repo, inventory_client, payment_client) -> OrderSagaCoordinator:
    return OrderSagaCoordinator(
        order_repo=order_repo, inventory_client=inventory_client, payment_client=payment_client
    )
