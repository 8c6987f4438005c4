from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_hold_repo import ISeatHoldRepo
from src.service.inventory.domain.entity.seat_hold_entity import SeatHold


class GetHoldUseCase:
    def __init__(self, *, seat_hold_repo: ISeatHoldRepo) -> None:
        self.seat_hold_repo = seat_hold_repo

    @classmethod
    @inject
    def depends(
        cls,
        seat_hold_repo: ISeatHoldRepo = Depends(Provide[Container.seat_hold_query_repo]),
    ) -> Self:
        return cls(seat_hold_repo=seat_hold_repo)

    @Logger.io
    async def get_hold(self, *, hold_id: str) -> SeatHold:
        hold = await self.seat_hold_repo.get(hold_id=hold_id)
        if hold is None:
            raise NotFoundError('hold not found', hold_id=hold_id)
        return hold
