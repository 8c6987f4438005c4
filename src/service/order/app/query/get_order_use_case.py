from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.order.app.dto.order_with_tickets import OrderWithTickets
from src.service.order.app.interface.i_order_repo import IOrderRepo


class GetOrderUseCase:
    def __init__(self, *, order_repo: IOrderRepo) -> None:
        self.order_repo = order_repo

    @classmethod
    @inject
    def depends(cls, order_repo: IOrderRepo = Depends(Provide[Container.order_repo])) -> Self:
        return cls(order_repo=order_repo)

    @Logger.io
    async def get_order(self, *, order_id: str) -> OrderWithTickets:
        order = await self.order_repo.get_by_id(order_id=order_id)
        if order is None:
            raise NotFoundError('Order not found', order_id=order_id)
        tickets = await self.order_repo.list_tickets(order_id=order_id)
        return OrderWithTickets(order=order, tickets=tickets)
