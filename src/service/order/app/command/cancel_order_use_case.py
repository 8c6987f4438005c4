from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.order.app.interface.i_order_repo import IOrderRepo
from src.service.order.app.service.order_saga_coordinator import OrderSagaCoordinator
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.enum.order_status import OrderStatus
from src.service.order.domain.saga.order_saga_state_machine import SagaEvent


class CancelOrderUseCase:
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
    async def cancel(self, *, order_id: str) -> Order:
        order = await self.order_repo.get_by_id(order_id=order_id)
        if order is None:
            raise NotFoundError('Order not found', order_id=order_id)
        if order.status == OrderStatus.CONFIRMED:
            raise ConflictError('Cannot cancel confirmed order', order_id=order_id)
        if order.status == OrderStatus.CANCELLED:
            raise ConflictError('Order already cancelled', order_id=order_id)

        cancelled = await self.coordinator.apply(order, SagaEvent.CANCEL_REQUESTED)
        Logger.base.info(f'🛑 [ORDER] Order {order_id} cancelled')
        return cancelled
