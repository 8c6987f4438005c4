from typing import List, Optional

from sqlalchemy import select, update

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_availability_repo import ISeatAvailabilityRepo
from src.service.inventory.domain.entity.seat_availability_entity import SeatAvailability
from src.service.inventory.domain.enum.seat_status import SeatStatus
from src.service.inventory.driven_adapter.model.seat_availability_model import (
    SeatAvailabilityModel,
)


class SeatAvailabilityRepoImpl(SessionRepo, ISeatAvailabilityRepo):
    @staticmethod
    def _to_entity(db_seat: SeatAvailabilityModel) -> SeatAvailability:
        return SeatAvailability(
            event_id=db_seat.event_id,
            seat_id=db_seat.seat_id,
            section=db_seat.section,
            row=db_seat.row,
            seat_number=db_seat.seat_number,
            price=db_seat.price,
            status=SeatStatus(db_seat.status),
            last_updated=db_seat.last_updated,
        )

    @Logger.io
    async def get(self, *, event_id: str, seat_id: str) -> Optional[SeatAvailability]:
        async with self._get_session() as session:
            db_seat = await session.get(SeatAvailabilityModel, (event_id, seat_id))
            return self._to_entity(db_seat) if db_seat else None

    @Logger.io
    async def get_for_update(self, *, event_id: str, seat_id: str) -> Optional[SeatAvailability]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatAvailabilityModel)
                .where(
                    SeatAvailabilityModel.event_id == event_id,
                    SeatAvailabilityModel.seat_id == seat_id,
                )
                .with_for_update()
            )
            db_seat = result.scalar_one_or_none()
            return self._to_entity(db_seat) if db_seat else None

    @Logger.io
    async def update_status(self, *, event_id: str, seat_id: str, status: SeatStatus) -> None:
        async with self._get_session() as session:
            await session.execute(
                update(SeatAvailabilityModel)
                .where(
                    SeatAvailabilityModel.event_id == event_id,
                    SeatAvailabilityModel.seat_id == seat_id,
                )
                .values(status=status.value)
            )

    @Logger.io
    async def release_if_held(self, *, seat_id: str, event_id: Optional[str] = None) -> int:
        stmt = update(SeatAvailabilityModel).where(
            SeatAvailabilityModel.seat_id == seat_id,
            SeatAvailabilityModel.status == SeatStatus.HELD.value,
        )
        if event_id is not None:
            stmt = stmt.where(SeatAvailabilityModel.event_id == event_id)

        async with self._get_session() as session:
            result = await session.execute(stmt.values(status=SeatStatus.AVAILABLE.value))
            return result.rowcount or 0  # type: ignore[attr-defined]

    @Logger.io(truncate_content=True)
    async def list_by_event(self, *, event_id: str) -> List[SeatAvailability]:
        async with self._get_session() as session:
            result = await session.execute(
                select(SeatAvailabilityModel)
                .where(SeatAvailabilityModel.event_id == event_id)
                .order_by(
                    SeatAvailabilityModel.section,
                    SeatAvailabilityModel.row,
                    SeatAvailabilityModel.seat_number,
                )
            )
            return [self._to_entity(db_seat) for db_seat in result.scalars().all()]
