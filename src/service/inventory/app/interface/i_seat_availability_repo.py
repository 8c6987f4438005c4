from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.inventory.domain.entity.seat_availability_entity import SeatAvailability
from src.service.inventory.domain.enum.seat_status import SeatStatus


class ISeatAvailabilityRepo(ABC):
    @abstractmethod
    async def get(self, *, event_id: str, seat_id: str) -> Optional[SeatAvailability]:
        pass

    @abstractmethod
    async def get_for_update(self, *, event_id: str, seat_id: str) -> Optional[SeatAvailability]:
        """
        Read the seat row and lock it until the surrounding transaction ends.

        Returns:
            Seat or None if the event has no such seat
        """
        pass

    @abstractmethod
    async def update_status(self, *, event_id: str, seat_id: str, status: SeatStatus) -> None:
        pass

    @abstractmethod
    async def release_if_held(self, *, seat_id: str, event_id: Optional[str] = None) -> int:
        """
        HELD -> AVAILABLE, guarded on the current status.

        A seat that was re-held or allocated meanwhile is left untouched.

        Returns:
            Number of seat rows reset
        """
        pass

    @abstractmethod
    async def list_by_event(self, *, event_id: str) -> List[SeatAvailability]:
        pass
