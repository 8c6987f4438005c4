from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.service.inventory.app.interface.i_seat_inventory_unit_of_work import (
    ISeatInventoryUnitOfWork,
)
from src.service.inventory.driven_adapter.repo.seat_allocation_repo_impl import (
    SeatAllocationRepoImpl,
)
from src.service.inventory.driven_adapter.repo.seat_availability_repo_impl import (
    SeatAvailabilityRepoImpl,
)
from src.service.inventory.driven_adapter.repo.seat_hold_repo_impl import SeatHoldRepoImpl


class SeatInventoryUnitOfWorkImpl(SqlAlchemyUnitOfWork, ISeatInventoryUnitOfWork):
    def _bind_repos(self, session: AsyncSession) -> None:
        self.seat_availability_repo = SeatAvailabilityRepoImpl()
        self.seat_availability_repo.session = session
        self.seat_hold_repo = SeatHoldRepoImpl()
        self.seat_hold_repo.session = session
        self.seat_allocation_repo = SeatAllocationRepoImpl()
        self.seat_allocation_repo.session = session
