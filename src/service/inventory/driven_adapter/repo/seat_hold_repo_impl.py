from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, update

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_hold_repo import ISeatHoldRepo
from src.service.inventory.domain.entity.seat_hold_entity import SeatHold
from src.service.inventory.domain.enum.seat_status import HoldStatus
from src.service.inventory.driven_adapter.model.seat_hold_model import SeatHoldModel


class SeatHoldRepoImpl(SessionRepo, ISeatHoldRepo):
    @staticmethod
    def _to_entity(db_hold: SeatHoldModel) -> SeatHold:
        return SeatHold(
            hold_id=db_hold.hold_id,
            idempotency_key=db_hold.idempotency_key,
            order_id=db_hold.order_id,
            event_id=db_hold.event_id,
            seat_id=db_hold.seat_id,
            user_id=db_hold.user_id,
            created_at=db_hold.created_at,
            expires_at=db_hold.expires_at,
            status=HoldStatus(db_hold.status),
        )

    @Logger.io
    async def create(self, *, hold: SeatHold) -> SeatHold:
        async with self._get_session() as session:
            session.add(
                SeatHoldModel(
                    hold_id=hold.hold_id,
                    idempotency_key=hold.idempotency_key,
                    order_id=hold.order_id,
                    event_id=hold.event_id,
                    seat_id=hold.seat_id,
                    user_id=hold.user_id,
                    created_at=hold.created_at,
                    expires_at=hold.expires_at,
                    status=hold.status.value,
                )
            )
            await session.flush()
            return hold

    @Logger.io
    async def get(self, *, hold_id: str) -> Optional[SeatHold]:
        async with self._get_session() as session:
            db_hold = await session.get(SeatHoldModel, hold_id)
            return self._to_entity(db_hold) if db_hold else None

    @Logger.io
    async def get_for_update(self, *, hold_id: str) -> Optional[SeatHold]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatHoldModel).where(SeatHoldModel.hold_id == hold_id).with_for_update()
            )
            db_hold = result.scalar_one_or_none()
            return self._to_entity(db_hold) if db_hold else None

    @Logger.io
    async def update_status(self, *, hold_id: str, status: HoldStatus) -> None:
        async with self._get_session() as session:
            await session.execute(
                update(SeatHoldModel)
                .where(SeatHoldModel.hold_id == hold_id)
                .values(status=status.value)
            )

    @Logger.io
    async def update_held_for_seat(
        self, *, seat_id: str, status: HoldStatus, event_id: Optional[str] = None
    ) -> int:
        stmt = update(SeatHoldModel).where(
            SeatHoldModel.seat_id == seat_id,
            SeatHoldModel.status == HoldStatus.HELD.value,
        )
        if event_id is not None:
            stmt = stmt.where(SeatHoldModel.event_id == event_id)

        async with self._get_session() as session:
            result = await session.execute(stmt.values(status=status.value))
            return result.rowcount or 0  # type: ignore[attr-defined]

    @Logger.io(truncate_content=True)
    async def list_expired_for_update(self, *, now: datetime) -> List[SeatHold]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatHoldModel)
                .where(
                    SeatHoldModel.status == HoldStatus.HELD.value,
                    SeatHoldModel.expires_at <= now,
                )
                .order_by(SeatHoldModel.seat_id)
                .with_for_update()
            )
            return [self._to_entity(db_hold) for db_hold in result.scalars().all()]
