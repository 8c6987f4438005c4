from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_seat_allocation_repo import ISeatAllocationRepo
from src.service.inventory.domain.entity.seat_allocation_entity import SeatAllocation
from src.service.inventory.driven_adapter.model.seat_allocation_model import SeatAllocationModel


class SeatAllocationRepoImpl(SessionRepo, ISeatAllocationRepo):
    @Logger.io
    async def create(self, *, allocation: SeatAllocation) -> SeatAllocation:
        async with self._get_session() as session:
            session.add(
                SeatAllocationModel(
                    allocation_id=allocation.allocation_id,
                    order_id=allocation.order_id,
                    event_id=allocation.event_id,
                    seats=allocation.seats,
                    created_at=allocation.created_at,
                )
            )
            await session.flush()
            return allocation
