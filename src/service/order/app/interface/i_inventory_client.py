from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from src.service.order.app.dto.inventory_dto import Reservation


class IInventoryClient(ABC):
    @abstractmethod
    async def reserve(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        duration_seconds: int,
        idempotency_key: str,
        user_id: Optional[str] = None,
    ) -> Reservation:
        pass

    @abstractmethod
    async def quote_prices(self, *, event_id: str, seats: List[str]) -> List[Decimal]:
        pass

    @abstractmethod
    async def allocate(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        hold_ids: Optional[List[str]] = None,
    ) -> None:
        pass

    @abstractmethod
    async def release(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        hold_ids: Optional[List[str]] = None,
    ) -> None:
        pass
