import anyio

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.inventory.app.command.expire_holds_use_case import ExpireHoldsUseCase


class HoldExpirySweeper:
    """
    Periodic reclaim of expired holds, owned by the inventory app lifespan.

    Started with `task_group.start_soon(sweeper.run_forever)` once the database is
    ready and stopped by cancelling the task group on shutdown. A failed sweep is
    logged and counted; the loop keeps running.
    """

    def __init__(
        self,
        *,
        expire_holds_use_case: ExpireHoldsUseCase,
        interval_seconds: float | None = None,
    ) -> None:
        self.expire_holds_use_case = expire_holds_use_case
        self.interval_seconds = (
            interval_seconds if interval_seconds is not None else settings.SWEEPER_INTERVAL_SECONDS
        )

    async def sweep_once(self) -> int:
        try:
            return await self.expire_holds_use_case.expire()
        except Exception as e:
            metrics.record_hold_expiry_failure()
            Logger.base.error(f'❌ [SWEEPER] Sweep rolled back: {e}')
            return 0

    async def run_forever(self) -> None:
        Logger.base.info(f'⏰ [SWEEPER] Started, interval {self.interval_seconds}s')
        try:
            while True:
                await self.sweep_once()
                await anyio.sleep(self.interval_seconds)
        except anyio.get_cancelled_exc_class():
            Logger.base.info('🛑 [SWEEPER] Stopped')
            raise
