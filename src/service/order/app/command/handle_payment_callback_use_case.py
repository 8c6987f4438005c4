from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    CustomBaseError,
    InvalidTransitionError,
    PricingFailedError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.order.app.interface.i_inventory_client import IInventoryClient
from src.service.order.app.interface.i_order_repo import IOrderRepo
from src.service.order.app.service.order_saga_coordinator import OrderSagaCoordinator
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.saga.order_saga_state_machine import SagaEvent


PAYMENT_PAID = 'PAID'
PAYMENT_FAILED = 'FAILED'


class HandlePaymentCallbackUseCase:
    """
    Asynchronous payment outcome from the gateway (at-least-once delivery).

    The saga state machine is the guard: a callback for an order that is no longer
    awaiting payment is an InvalidTransitionError and is dropped. Nothing raised in
    here reaches the caller; failures are logged and counted.
    """

    def __init__(
        self,
        *,
        order_repo: IOrderRepo,
        inventory_client: IInventoryClient,
        coordinator: OrderSagaCoordinator,
    ) -> None:
        self.order_repo = order_repo
        self.inventory_client = inventory_client
        self.coordinator = coordinator
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        order_repo: IOrderRepo = Depends(Provide[Container.order_repo]),
        inventory_client: IInventoryClient = Depends(Provide[Container.inventory_client]),
        coordinator: OrderSagaCoordinator = Depends(Provide[Container.order_saga_coordinator]),
    ) -> Self:
        return cls(
            order_repo=order_repo, inventory_client=inventory_client, coordinator=coordinator
        )

    @Logger.io
    async def handle(self, *, order_id: str, status: str, payment_id: Optional[str]) -> None:
        with self.tracer.start_as_current_span(
            'use_case.payment_callback',
            attributes={'order.id': order_id, 'payment.status': status},
        ):
            try:
                order = await self.order_repo.get_by_id(order_id=order_id)
                if order is None:
                    Logger.base.warning(f'⚠️ [WEBHOOK] Payment callback for unknown order {order_id}')
                    return
                if status == PAYMENT_PAID:
                    await self._on_paid(order, payment_id=payment_id)
                elif status == PAYMENT_FAILED:
                    await self.coordinator.apply(order, SagaEvent.PAYMENT_DECLINED)
            except InvalidTransitionError as e:
                Logger.base.info(f'⏭️ [WEBHOOK] Payment {status} ignored for order {order_id}: {e}')
            except Exception as e:
                metrics.record_webhook_failure(source='payment')
                Logger.base.error(f'❌ [WEBHOOK] Payment callback failed for order {order_id}: {e}')

    async def _on_paid(self, order: Order, *, payment_id: Optional[str]) -> None:
        order = await self.coordinator.apply(
            order, SagaEvent.PAYMENT_CAPTURED, payment_id=payment_id or order.payment_id
        )
        try:
            prices = await self.inventory_client.quote_prices(
                event_id=order.event_id, seats=order.seats
            )
            if len(prices) != len(order.seats):
                raise PricingFailedError(
                    f'Expected {len(order.seats)} prices, got {len(prices)}',
                    order_id=order.order_id,
                )
        except CustomBaseError:
            # Paid but unpriceable: unwind like a failed allocation
            await self.coordinator.apply(order, SagaEvent.ALLOCATION_FAILED)
            raise
        await self.coordinator.fulfil(order, prices=prices)
