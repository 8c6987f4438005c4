"""
Unit tests for the payment and reservation webhook handlers

Handlers never raise: unknown orders and late or duplicate callbacks are dropped,
other failures are logged and counted.
"""

from decimal import Decimal

import attrs
import pytest

from src.platform.exception.exceptions import UpstreamResponseError, UpstreamUnavailableError
from src.service.order.app.command.handle_payment_callback_use_case import (
    HandlePaymentCallbackUseCase,
)
from src.service.order.app.command.handle_reservation_callback_use_case import (
    HandleReservationCallbackUseCase,
)
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.enum.order_status import OrderStatus, PaymentMethod, PaymentStatus


@pytest.fixture
def payment_handler(order_repo, inventory_client, coordinator) -> HandlePaymentCallbackUseCase:
    return HandlePaymentCallbackUseCase(
        order_repo=order_repo, inventory_client=inventory_client, coordinator=coordinator
    )


@pytest.fixture
def reservation_handler(order_repo, coordinator) -> HandleReservationCallbackUseCase:
    return HandleReservationCallbackUseCase(order_repo=order_repo, coordinator=coordinator)


async def _pending_order(order_repo, **changes) -> Order:
    order = Order.create(
        user_id='U1',
        event_id='E1',
        seats=['A-1-1', 'A-1-2'],
        payment_method=PaymentMethod.NETBANKING,
        idempotency_key='k1',
    )
    order = attrs.evolve(
        order,
        status=OrderStatus.PENDING_PAYMENT,
        hold_ids=['h1', 'h2'],
        total=Decimal('210.00'),
        tax=Decimal('10.00'),
        **changes,
    )
    return await order_repo.create(order=order)


class TestPaymentCallback:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_paid_confirms_order_with_quoted_prices(
        self, payment_handler, order_repo, inventory_client
    ):
        inventory_client.quote_prices.return_value = [Decimal('120.00'), Decimal('80.00')]
        order = await _pending_order(order_repo)

        await payment_handler.handle(order_id=order.order_id, status='PAID', payment_id='pay_7')

        stored = order_repo.orders[order.order_id]
        assert (stored.status, stored.payment_status) == (OrderStatus.CONFIRMED, PaymentStatus.PAID)
        assert stored.payment_id == 'pay_7'
        assert [t.price for t in order_repo.tickets] == [Decimal('120.00'), Decimal('80.00')]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_duplicate_paid_callback_is_ignored(
        self, payment_handler, order_repo, inventory_client
    ):
        order = await _pending_order(order_repo)
        await payment_handler.handle(order_id=order.order_id, status='PAID', payment_id='pay_7')

        await payment_handler.handle(order_id=order.order_id, status='PAID', payment_id='pay_7')

        assert inventory_client.allocate.await_count == 1
        assert len(order_repo.tickets) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_paid_with_failed_allocation_refunds(
        self, payment_handler, order_repo, inventory_client, payment_client
    ):
        inventory_client.allocate.side_effect = UpstreamResponseError('hold expired', 409)
        order = await _pending_order(order_repo)

        await payment_handler.handle(order_id=order.order_id, status='PAID', payment_id='pay_7')

        stored = order_repo.orders[order.order_id]
        assert stored.status == OrderStatus.CANCELLED
        payment_client.refund.assert_awaited_once_with(payment_id='pay_7')

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_paid_with_unpriceable_seats_refunds(
        self, payment_handler, order_repo, inventory_client, payment_client
    ):
        inventory_client.quote_prices.side_effect = UpstreamUnavailableError('inventory down')
        order = await _pending_order(order_repo)

        await payment_handler.handle(order_id=order.order_id, status='PAID', payment_id='pay_7')

        assert order_repo.orders[order.order_id].status == OrderStatus.CANCELLED
        payment_client.refund.assert_awaited_once_with(payment_id='pay_7')
        inventory_client.allocate.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_paid_with_short_price_list_refunds(
        self, payment_handler, order_repo, inventory_client, payment_client
    ):
        inventory_client.quote_prices.return_value = [Decimal('120.00')]
        order = await _pending_order(order_repo)

        await payment_handler.handle(order_id=order.order_id, status='PAID', payment_id='pay_7')

        stored = order_repo.orders[order.order_id]
        assert (stored.status, stored.payment_status) == (
            OrderStatus.CANCELLED,
            PaymentStatus.FAILED,
        )
        payment_client.refund.assert_awaited_once_with(payment_id='pay_7')
        inventory_client.release.assert_awaited_once()
        inventory_client.allocate.assert_not_awaited()
        assert order_repo.tickets == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_cancels_and_releases(self, payment_handler, order_repo, inventory_client):
        order = await _pending_order(order_repo)

        await payment_handler.handle(order_id=order.order_id, status='FAILED', payment_id=None)

        stored = order_repo.orders[order.order_id]
        assert (stored.status, stored.payment_status) == (
            OrderStatus.CANCELLED,
            PaymentStatus.FAILED,
        )
        inventory_client.release.assert_awaited_once()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_callback_for_confirmed_order_is_ignored(self, payment_handler, order_repo):
        order = await _pending_order(order_repo, payment_status=PaymentStatus.PAID)
        order_repo.orders[order.order_id] = attrs.evolve(order, status=OrderStatus.CONFIRMED)

        await payment_handler.handle(order_id=order.order_id, status='FAILED', payment_id=None)

        assert order_repo.orders[order.order_id].status == OrderStatus.CONFIRMED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_order_is_ignored(self, payment_handler, inventory_client):
        await payment_handler.handle(order_id='missing', status='PAID', payment_id='pay_1')

        inventory_client.allocate.assert_not_awaited()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_repository_failure_is_swallowed(self, payment_handler, order_repo):
        async def broken(**_kwargs):
            raise RuntimeError('db down')

        order_repo.get_by_id = broken

        await payment_handler.handle(order_id='O1', status='PAID', payment_id='pay_1')


class TestReservationCallback:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_expired_cancels_and_refunds_paid_order(
        self, reservation_handler, order_repo, inventory_client, payment_client
    ):
        order = await _pending_order(
            order_repo, payment_status=PaymentStatus.PAID, payment_id='pay_3'
        )

        await reservation_handler.handle(order_id=order.order_id, action='EXPIRED')

        assert order_repo.orders[order.order_id].status == OrderStatus.CANCELLED
        inventory_client.release.assert_awaited_once()
        payment_client.refund.assert_awaited_once_with(payment_id='pay_3')

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_expired_on_cancelled_order_is_ignored(
        self, reservation_handler, order_repo, inventory_client
    ):
        order = await _pending_order(order_repo)
        order_repo.orders[order.order_id] = attrs.evolve(order, status=OrderStatus.CANCELLED)

        await reservation_handler.handle(order_id=order.order_id, action='EXPIRED')

        inventory_client.release.assert_not_awaited()
