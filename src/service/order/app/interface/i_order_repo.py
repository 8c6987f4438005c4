from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.entity.ticket_entity import Ticket


class IOrderRepo(ABC):
    @abstractmethod
    async def create(self, *, order: Order) -> Order:
        pass

    @abstractmethod
    async def get_by_id(self, *, order_id: str) -> Optional[Order]:
        pass

    @abstractmethod
    async def save(
        self, *, order: Order, expected_version: int, tickets: Sequence[Ticket] = ()
    ) -> Order:
        """
        Compare-and-swap write of the whole order, plus any tickets, in one transaction.

        Raises:
            OrderVersionConflictError: the stored row is no longer at expected_version
        """
        pass

    @abstractmethod
    async def list_tickets(self, *, order_id: str) -> List[Ticket]:
        pass
