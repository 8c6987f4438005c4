from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.inventory.domain.entity.seat_hold_entity import SeatHold
from src.service.inventory.domain.enum.seat_status import HoldStatus


class ISeatHoldRepo(ABC):
    @abstractmethod
    async def create(self, *, hold: SeatHold) -> SeatHold:
        pass

    @abstractmethod
    async def get(self, *, hold_id: str) -> Optional[SeatHold]:
        pass

    @abstractmethod
    async def get_for_update(self, *, hold_id: str) -> Optional[SeatHold]:
        pass

    @abstractmethod
    async def update_status(self, *, hold_id: str, status: HoldStatus) -> None:
        pass

    @abstractmethod
    async def update_held_for_seat(
        self, *, seat_id: str, status: HoldStatus, event_id: Optional[str] = None
    ) -> int:
        """
        Move every HELD hold on the seat to `status`.

        Returns:
            Number of holds updated
        """
        pass

    @abstractmethod
    async def list_expired_for_update(self, *, now: datetime) -> List[SeatHold]:
        """HELD holds with expires_at <= now, locked until the transaction ends"""
        pass
