from typing import Optional

import attrs
from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse

from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.command.allocate_seats_use_case import AllocateSeatsUseCase
from src.service.inventory.app.command.release_seats_use_case import ReleaseSeatsUseCase
from src.service.inventory.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.inventory.app.query.get_hold_use_case import GetHoldUseCase
from src.service.inventory.app.query.list_seats_use_case import ListSeatsUseCase
from src.service.inventory.app.query.quote_seat_prices_use_case import QuoteSeatPricesUseCase
from src.service.inventory.driving_adapter.http_controller.schema.seat_inventory_schema import (
    AllocateRequest,
    AllocateResponse,
    HoldEnvelopeResponse,
    HoldResponse,
    ReleaseRequest,
    ReleaseResponse,
    ReserveRequest,
    SeatListResponse,
    SeatPricesRequest,
    SeatPricesResponse,
    SeatResponse,
    SeatSnapshotResponse,
)


router = APIRouter(tags=['inventory'])


@router.post('/reserve')
@Logger.io
async def reserve_seats(
    request: ReserveRequest,
    idempotency_key: Optional[str] = Header(default=None, alias='Idempotency-Key'),
    use_case: ReserveSeatsUseCase = Depends(ReserveSeatsUseCase.depends),
) -> JSONResponse:
    """Hold all seats or none; replays the stored response for a repeated Idempotency-Key."""
    stored = await use_case.reserve(
        order_id=request.order_id,
        event_id=request.event_id,
        seats=request.seats,
        user_id=request.user_id,
        duration_seconds=request.duration_seconds,
        idempotency_key=idempotency_key,
    )
    return JSONResponse(status_code=stored.status_code, content=stored.body)


@router.post('/allocate')
@Logger.io
async def allocate_seats(
    request: AllocateRequest,
    use_case: AllocateSeatsUseCase = Depends(AllocateSeatsUseCase.depends),
) -> AllocateResponse:
    allocation = await use_case.allocate(
        order_id=request.order_id,
        event_id=request.event_id,
        seats=request.seats,
        hold_ids=request.hold_ids,
    )
    return AllocateResponse(
        allocation_id=allocation.allocation_id,
        allocated=[SeatSnapshotResponse(**snapshot) for snapshot in allocation.seats],
    )


@router.post('/release')
@Logger.io
async def release_seats(
    request: ReleaseRequest,
    use_case: ReleaseSeatsUseCase = Depends(ReleaseSeatsUseCase.depends),
) -> ReleaseResponse:
    result = await use_case.release(
        hold_ids=request.hold_ids,
        seats=request.seats,
        event_id=request.event_id,
    )
    return ReleaseResponse(
        released_holds=result.released_holds, released_seats=result.released_seats
    )


@router.post('/seat-prices')
@Logger.io
async def quote_seat_prices(
    request: SeatPricesRequest,
    use_case: QuoteSeatPricesUseCase = Depends(QuoteSeatPricesUseCase.depends),
) -> SeatPricesResponse:
    prices = await use_case.quote(event_id=request.event_id, seats=request.seats)
    return SeatPricesResponse(prices=[float(price) for price in prices])


@router.get('/seats')
@Logger.io
async def list_seats(
    event_id: str = Query(alias='eventId'),
    use_case: ListSeatsUseCase = Depends(ListSeatsUseCase.depends),
) -> SeatListResponse:
    seats = await use_case.list_seats(event_id=event_id)
    return SeatListResponse(
        seats=[
            SeatResponse(
                seat_id=seat.seat_id,
                section=seat.section,
                row=seat.row,
                seat_number=seat.seat_number,
                price=float(seat.price),
                status=seat.status.value,
            )
            for seat in seats
        ]
    )


@router.get('/holds/{hold_id}')
@Logger.io
async def get_hold(
    hold_id: str,
    use_case: GetHoldUseCase = Depends(GetHoldUseCase.depends),
) -> HoldEnvelopeResponse:
    hold = await use_case.get_hold(hold_id=hold_id)
    return HoldEnvelopeResponse(hold=HoldResponse(**attrs.asdict(hold)))
