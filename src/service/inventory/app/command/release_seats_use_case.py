from typing import Callable, List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_inventory_unit_of_work import (
    ISeatInventoryUnitOfWork,
)
from src.service.inventory.domain.enum.seat_status import HoldStatus


@attrs.frozen
class ReleaseResult:
    released_holds: int
    released_seats: int


class ReleaseSeatsUseCase:
    """
    Best-effort cleanup: missing rows are skipped and nothing here fails on state.

    A seat only goes back to AVAILABLE while it is still HELD, so a seat that was
    re-held or allocated by another flow in the meantime is never touched.
    """

    def __init__(self, *, uow_factory: Callable[[], ISeatInventoryUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], ISeatInventoryUnitOfWork] = Depends(
            Provide[Container.seat_inventory_uow.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def release(
        self,
        *,
        hold_ids: Optional[List[str]] = None,
        seats: Optional[List[str]] = None,
        event_id: Optional[str] = None,
    ) -> ReleaseResult:
        if not hold_ids and not seats:
            raise ValidationError('holdIds[] or seats[] required')

        released_holds = 0
        released_seats = 0
        async with self.uow_factory() as uow:
            for hold_id in hold_ids or []:
                hold = await uow.seat_hold_repo.get_for_update(hold_id=hold_id)
                if hold is None or hold.status != HoldStatus.HELD:
                    continue
                await uow.seat_hold_repo.update_status(hold_id=hold_id, status=HoldStatus.RELEASED)
                released_holds += 1
                released_seats += await uow.seat_availability_repo.release_if_held(
                    seat_id=hold.seat_id, event_id=hold.event_id
                )

            for seat_id in seats or []:
                released_holds += await uow.seat_hold_repo.update_held_for_seat(
                    seat_id=seat_id, status=HoldStatus.RELEASED, event_id=event_id
                )
                released_seats += await uow.seat_availability_repo.release_if_held(
                    seat_id=seat_id, event_id=event_id
                )

            await uow.commit()

        Logger.base.info(
            f'🔓 [RELEASE] Released {released_holds} hold(s), {released_seats} seat(s)'
        )
        return ReleaseResult(released_holds=released_holds, released_seats=released_seats)
