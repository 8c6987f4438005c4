from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_availability_repo import ISeatAvailabilityRepo
from src.service.inventory.domain.entity.seat_availability_entity import SeatAvailability


class ListSeatsUseCase:
    def __init__(self, *, seat_availability_repo: ISeatAvailabilityRepo) -> None:
        self.seat_availability_repo = seat_availability_repo

    @classmethod
    @inject
    def depends(
        cls,
        seat_availability_repo: ISeatAvailabilityRepo = Depends(
            Provide[Container.seat_availability_query_repo]
        ),
    ) -> Self:
        return cls(seat_availability_repo=seat_availability_repo)

    @Logger.io(truncate_content=True)
    async def list_seats(self, *, event_id: str) -> List[SeatAvailability]:
        return await self.seat_availability_repo.list_by_event(event_id=event_id)
