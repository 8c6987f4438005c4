from abc import ABC, abstractmethod

from src.service.inventory.domain.entity.seat_allocation_entity import SeatAllocation


class ISeatAllocationRepo(ABC):
    @abstractmethod
    async def create(self, *, allocation: SeatAllocation) -> SeatAllocation:
        pass
