from decimal import Decimal
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import SeatNotFoundError, ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_availability_repo import ISeatAvailabilityRepo


class QuoteSeatPricesUseCase:
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

    @Logger.io
    async def quote(self, *, event_id: str, seats: List[str]) -> List[Decimal]:
        """Authoritative per-seat prices, in the order the seats were given"""
        if not seats:
            raise ValidationError('eventId and seats[] required')

        prices: List[Decimal] = []
        for seat_id in seats:
            seat = await self.seat_availability_repo.get(event_id=event_id, seat_id=seat_id)
            if seat is None:
                raise SeatNotFoundError(
                    f'Seat {seat_id} not found for event {event_id}',
                    seat_id=seat_id,
                    event_id=event_id,
                )
            prices.append(seat.price)
        return prices
