from datetime import datetime, timedelta, timezone
from typing import Any, Callable, List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    CustomBaseError,
    EventNotOnSaleError,
    SeatNotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.inventory.app.dto.stored_response import StoredResponse
from src.service.inventory.app.interface.i_catalog_client import ICatalogClient
from src.service.inventory.app.interface.i_idempotency_response_repo import (
    IIdempotencyResponseRepo,
)
from src.service.inventory.app.interface.i_seat_inventory_unit_of_work import (
    ISeatInventoryUnitOfWork,
)
from src.service.inventory.domain.entity.seat_hold_entity import SeatHold


EVENT_ON_SALE = 'ON_SALE'


class ReserveSeatsUseCase:
    """
    Hold every requested seat or none of them.

    Flow:
    1. Replay the stored response when the idempotency key was seen before
    2. In one transaction: check the event is on sale (when a catalog is configured),
       then lock each seat in caller order and flip AVAILABLE -> HELD with a new SeatHold
    3. Store the outcome under the idempotency key, failures included

    Catalog transport failures (503) are raised instead of stored, so a retry can succeed.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], ISeatInventoryUnitOfWork],
        idempotency_repo: IIdempotencyResponseRepo,
        catalog_client: Optional[ICatalogClient] = None,
    ) -> None:
        self.uow_factory = uow_factory
        self.idempotency_repo = idempotency_repo
        self.catalog_client = catalog_client
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], ISeatInventoryUnitOfWork] = Depends(
            Provide[Container.seat_inventory_uow.provider]
        ),
        idempotency_repo: IIdempotencyResponseRepo = Depends(
            Provide[Container.idempotency_response_repo]
        ),
        catalog_client: Optional[ICatalogClient] = Depends(
            Provide[Container.inventory_catalog_client]
        ),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            idempotency_repo=idempotency_repo,
            catalog_client=catalog_client,
        )

    @Logger.io
    async def reserve(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        user_id: Optional[str] = None,
        duration_seconds: Optional[int] = None,
        idempotency_key: Optional[str] = None,
    ) -> StoredResponse:
        if not seats:
            raise ValidationError('seats must not be empty', order_id=order_id)

        if idempotency_key:
            cached = await self.idempotency_repo.get(idempotency_key=idempotency_key)
            if cached is not None:
                Logger.base.info(
                    f'♻️ [RESERVE] Replaying stored {cached.status_code} for key {idempotency_key}'
                )
                return cached

        with self.tracer.start_as_current_span(
            'use_case.reserve_seats',
            attributes={'order.id': order_id, 'event.id': event_id, 'seat.count': len(seats)},
        ):
            try:
                body = await self._hold_seats(
                    order_id=order_id,
                    event_id=event_id,
                    seats=seats,
                    user_id=user_id,
                    duration_seconds=duration_seconds or settings.HOLD_DURATION_SECONDS,
                    idempotency_key=idempotency_key,
                )
            except UpstreamUnavailableError:
                metrics.record_reservation(success=False)
                raise
            except CustomBaseError as e:
                metrics.record_reservation(success=False)
                Logger.base.warning(f'🚫 [RESERVE] Order {order_id} rejected: {e.message}')
                response = StoredResponse(status_code=e.status_code, body=e.to_body())
                await self._remember(idempotency_key, response)
                return response

            metrics.record_reservation(success=True)
            Logger.base.info(f'🎫 [RESERVE] Order {order_id} holds {len(seats)} seat(s)')
            response = StoredResponse(status_code=200, body=body)
            await self._remember(idempotency_key, response)
            return response

    async def _hold_seats(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        user_id: Optional[str],
        duration_seconds: int,
        idempotency_key: Optional[str],
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(seconds=duration_seconds)
        reserved: list[dict[str, Any]] = []

        async with self.uow_factory() as uow:
            if self.catalog_client is not None:
                status = await self.catalog_client.get_event_status(event_id=event_id)
                if status != EVENT_ON_SALE:
                    raise EventNotOnSaleError('Event not on sale', event_id=event_id)

            for seat_id in seats:
                seat = await uow.seat_availability_repo.get_for_update(
                    event_id=event_id, seat_id=seat_id
                )
                if seat is None:
                    raise SeatNotFoundError(
                        f'Seat {seat_id} not found', seat_id=seat_id, event_id=event_id
                    )
                held = seat.hold()
                await uow.seat_availability_repo.update_status(
                    event_id=event_id, seat_id=seat_id, status=held.status
                )
                hold = await uow.seat_hold_repo.create(
                    hold=SeatHold.create(
                        order_id=order_id,
                        event_id=event_id,
                        seat_id=seat_id,
                        user_id=user_id,
                        idempotency_key=idempotency_key,
                        duration_seconds=duration_seconds,
                        now=now,
                    )
                )
                reserved.append({'holdId': hold.hold_id, 'seatId': seat_id, 'price': float(seat.price)})

            await uow.commit()

        return {
            'holdIds': [r['holdId'] for r in reserved],
            'reserved': reserved,
            'expiresAt': expires_at.isoformat(),
        }

    async def _remember(self, idempotency_key: Optional[str], response: StoredResponse) -> None:
        if idempotency_key:
            await self.idempotency_repo.save(idempotency_key=idempotency_key, response=response)
