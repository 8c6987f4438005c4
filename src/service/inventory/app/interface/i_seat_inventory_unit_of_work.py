from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.inventory.app.interface.i_seat_allocation_repo import ISeatAllocationRepo
from src.service.inventory.app.interface.i_seat_availability_repo import ISeatAvailabilityRepo
from src.service.inventory.app.interface.i_seat_hold_repo import ISeatHoldRepo


class ISeatInventoryUnitOfWork(AbstractUnitOfWork):
    """
    Seat inventory transaction.

    Usage:
        async with uow:
            seat = await uow.seat_availability_repo.get_for_update(...)
            await uow.commit()
    """

    seat_availability_repo: ISeatAvailabilityRepo
    seat_hold_repo: ISeatHoldRepo
    seat_allocation_repo: ISeatAllocationRepo
