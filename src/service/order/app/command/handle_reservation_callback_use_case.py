from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import InvalidTransitionError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.order.app.interface.i_order_repo import IOrderRepo
from src.service.order.app.service.order_saga_coordinator import OrderSagaCoordinator
from src.service.order.domain.saga.order_saga_state_machine import SagaEvent


RESERVATION_EXPIRED = 'EXPIRED'


class HandleReservationCallbackUseCase:
    """Hold expiry notice from inventory; cancels CREATED or PENDING_PAYMENT orders."""

    def __init__(self, *, order_repo: IOrderRepo, coordinator: OrderSagaCoordinator) -> None:
        self.order_repo = order_repo
        self.coordinator = coordinator

    @classmethod
    @inject
    def depends(
        cls,
        order_repo: IOrderRepo = Depends(Provide[Container.order_repo]),
        coordinator: OrderSagaCoordinator = Depends(Provide[Container.order_saga_coordinator]),
    ) -> Self:
        return cls(order_repo=order_repo, coordinator=coordinator)

    @Logger.io
    async def handle(self, *, order_id: str, action: str) -> None:
        try:
            order = await self.order_repo.get_by_id(order_id=order_id)
            if order is None:
                Logger.base.warning(f'⚠️ [WEBHOOK] Reservation callback for unknown order {order_id}')
                return
            if action == RESERVATION_EXPIRED:
                await self.coordinator.apply(order, SagaEvent.RESERVATION_EXPIRED)
        except InvalidTransitionError as e:
            Logger.base.info(f'⏭️ [WEBHOOK] Reservation {action} ignored for order {order_id}: {e}')
        except Exception as e:
            metrics.record_webhook_failure(source='reservation')
            Logger.base.error(f'❌ [WEBHOOK] Reservation callback failed for order {order_id}: {e}')
