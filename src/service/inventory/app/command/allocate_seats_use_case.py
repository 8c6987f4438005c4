from typing import Any, Callable, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    HoldConflictError,
    SeatNotFoundError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.inventory.app.interface.i_seat_inventory_unit_of_work import (
    ISeatInventoryUnitOfWork,
)
from src.service.inventory.domain.entity.seat_allocation_entity import SeatAllocation
from src.service.inventory.domain.enum.seat_status import HoldStatus


class AllocateSeatsUseCase:
    """
    HELD -> ALLOCATED for every seat of an order, all-or-nothing.

    Holds are matched by id when the caller passes them, otherwise by seat. Listed
    holds must belong to the order and cover each seat exactly once.
    A hold that expired or was released mid-saga surfaces as HoldConflictError.
    """

    def __init__(self, *, uow_factory: Callable[[], ISeatInventoryUnitOfWork]) -> None:
        self.uow_factory = uow_factory
        self.tracer = trace.get_tracer(__name__)

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
    async def allocate(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        hold_ids: Optional[List[str]] = None,
    ) -> SeatAllocation:
        if not seats:
            raise ValidationError('seats must not be empty', order_id=order_id)

        with self.tracer.start_as_current_span(
            'use_case.allocate_seats',
            attributes={'order.id': order_id, 'event.id': event_id, 'seat.count': len(seats)},
        ):
            async with self.uow_factory() as uow:
                if hold_ids:
                    await self._claim_holds(
                        uow, order_id=order_id, event_id=event_id, seats=seats, hold_ids=hold_ids
                    )

                snapshots: list[dict[str, Any]] = []
                for seat_id in seats:
                    seat = await uow.seat_availability_repo.get_for_update(
                        event_id=event_id, seat_id=seat_id
                    )
                    if seat is None:
                        raise SeatNotFoundError(
                            f'Seat {seat_id} not found', seat_id=seat_id, event_id=event_id
                        )
                    allocated = seat.allocate()
                    await uow.seat_availability_repo.update_status(
                        event_id=event_id, seat_id=seat_id, status=allocated.status
                    )
                    snapshots.append(seat.snapshot())

                if not hold_ids:
                    for seat_id in seats:
                        await uow.seat_hold_repo.update_held_for_seat(
                            seat_id=seat_id, status=HoldStatus.ALLOCATED, event_id=event_id
                        )

                allocation = await uow.seat_allocation_repo.create(
                    allocation=SeatAllocation.create(
                        order_id=order_id, event_id=event_id, seats=snapshots
                    )
                )
                await uow.commit()

            metrics.record_allocation()
            Logger.base.info(f'✅ [ALLOCATE] Order {order_id} allocated {len(seats)} seat(s)')
            return allocation

    async def _claim_holds(
        self,
        uow: ISeatInventoryUnitOfWork,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        hold_ids: List[str],
    ) -> None:
        """Every seat must be covered by exactly one active hold of this order."""
        covered: dict[str, str] = {}
        for hold_id in hold_ids:
            hold = await uow.seat_hold_repo.get_for_update(hold_id=hold_id)
            if (
                hold is None
                or hold.status != HoldStatus.HELD
                or hold.order_id != order_id
                or hold.event_id != event_id
                or hold.seat_id not in seats
                or hold.seat_id in covered
            ):
                raise HoldConflictError(
                    f'Hold {hold_id} is not active for this allocation',
                    hold_id=hold_id,
                    order_id=order_id,
                )
            covered[hold.seat_id] = hold_id

        uncovered = [seat_id for seat_id in seats if seat_id not in covered]
        if uncovered:
            raise HoldConflictError(
                'Seats are not covered by the given holds',
                seats=uncovered,
                order_id=order_id,
            )

        for hold_id in covered.values():
            await uow.seat_hold_repo.update_status(hold_id=hold_id, status=HoldStatus.ALLOCATED)
