from abc import ABC, abstractmethod
from typing import Optional

from src.service.inventory.app.dto.stored_response import StoredResponse


class IIdempotencyResponseRepo(ABC):
    """
    Response cache for mutating inventory calls.

    Records are written once per key (first writer wins) and never updated.
    """

    @abstractmethod
    async def get(self, *, idempotency_key: str) -> Optional[StoredResponse]:
        pass

    @abstractmethod
    async def save(self, *, idempotency_key: str, response: StoredResponse) -> None:
        pass
