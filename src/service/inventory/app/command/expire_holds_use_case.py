from datetime import datetime, timezone
from typing import Callable, Optional

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.inventory.app.interface.i_seat_inventory_unit_of_work import (
    ISeatInventoryUnitOfWork,
)
from src.service.inventory.domain.enum.seat_status import HoldStatus


class ExpireHoldsUseCase:
    """
    One sweep: release every HELD hold past its expires_at in a single transaction.

    Any error rolls the whole batch back; a hold already RELEASED is never selected
    again, so re-running a sweep is harmless.
    """

    def __init__(self, *, uow_factory: Callable[[], ISeatInventoryUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @Logger.io
    async def expire(self, *, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        async with self.uow_factory() as uow:
            expired = await uow.seat_hold_repo.list_expired_for_update(now=now)
            for hold in expired:
                await uow.seat_hold_repo.update_status(
                    hold_id=hold.hold_id, status=HoldStatus.RELEASED
                )
                await uow.seat_availability_repo.release_if_held(
                    seat_id=hold.seat_id, event_id=hold.event_id
                )
            await uow.commit()

        if expired:
            metrics.record_hold_expiry(released=len(expired))
            Logger.base.info(f'⏰ [SWEEPER] Released {len(expired)} expired hold(s)')
        return len(expired)
