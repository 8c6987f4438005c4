from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.service.order.domain.entity.order_idempotency_record_entity import (
    OrderIdempotencyRecord,
)


class IOrderIdempotencyRepo(ABC):
    @abstractmethod
    async def get(self, *, key: str) -> Optional[OrderIdempotencyRecord]:
        pass

    @abstractmethod
    async def start(self, *, record: OrderIdempotencyRecord) -> bool:
        """
        Insert the IN_PROGRESS marker; an expired record under the same key is replaced.

        Returns:
            False when another live record already holds the key
        """
        pass

    @abstractmethod
    async def complete(self, *, key: str, expires_at: datetime) -> None:
        pass

    @abstractmethod
    async def discard(self, *, key: str) -> None:
        """Drop an IN_PROGRESS marker so the key can be retried"""
        pass
