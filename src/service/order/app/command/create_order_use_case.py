import hashlib
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Self

import orjson
import uuid_utils
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    InternalError,
    InvalidTransitionError,
    NotFoundError,
    PaymentDeclinedError,
    PricingFailedError,
    UpstreamResponseError,
    UpstreamUnavailableError,
)
from src.platform.logging.loguru_io import Logger
from src.service.order.app.dto.order_with_tickets import OrderWithTickets
from src.service.order.app.interface.i_directory_client import IDirectoryClient
from src.service.order.app.interface.i_inventory_client import IInventoryClient
from src.service.order.app.interface.i_order_idempotency_repo import IOrderIdempotencyRepo
from src.service.order.app.interface.i_order_repo import IOrderRepo
from src.service.order.app.interface.i_payment_client import IPaymentClient
from src.service.order.app.service.order_saga_coordinator import OrderSagaCoordinator
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.entity.order_idempotency_record_entity import (
    OrderIdempotencyRecord,
)
from src.service.order.domain.enum.idempotency_status import IdempotencyStatus
from src.service.order.domain.enum.order_status import OrderStatus, PaymentMethod, PaymentStatus
from src.service.order.domain.saga.order_saga_state_machine import SagaEvent
from src.service.order.domain.value_object.price_breakdown import calculate_total


def request_fingerprint(
    *, user_id: str, event_id: str, seats: List[str], payment_method: PaymentMethod
) -> str:
    payload = orjson.dumps(
        {
            'userId': user_id,
            'eventId': event_id,
            'seats': seats,
            'paymentMethod': payment_method.value,
        },
        option=orjson.OPT_SORT_KEYS,
    )
    return hashlib.sha256(payload).hexdigest()


class CreateOrderUseCase:
    """
    Synchronous order saga: reserve -> price -> charge -> allocate -> issue tickets.

    The Idempotency-Key is claimed with an IN_PROGRESS marker before anything else is
    written, so a concurrent duplicate is rejected instead of running a second saga.
    The marker becomes COMPLETED once the order is confirmed; any failure drops it so
    the client may retry with the same key.
    """

    def __init__(
        self,
        *,
        order_repo: IOrderRepo,
        idempotency_repo: IOrderIdempotencyRepo,
        inventory_client: IInventoryClient,
        payment_client: IPaymentClient,
        user_directory: IDirectoryClient,
        catalog_directory: IDirectoryClient,
        coordinator: OrderSagaCoordinator,
    ) -> None:
        self.order_repo = order_repo
        self.idempotency_repo = idempotency_repo
        self.inventory_client = inventory_client
        self.payment_client = payment_client
        self.user_directory = user_directory
        self.catalog_directory = catalog_directory
        self.coordinator = coordinator
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        order_repo: IOrderRepo = Depends(Provide[Container.order_repo]),
        idempotency_repo: IOrderIdempotencyRepo = Depends(
            Provide[Container.order_idempotency_repo]
        ),
        inventory_client: IInventoryClient = Depends(Provide[Container.inventory_client]),
        payment_client: IPaymentClient = Depends(Provide[Container.payment_client]),
        user_directory: IDirectoryClient = Depends(Provide[Container.user_directory_client]),
        catalog_directory: IDirectoryClient = Depends(
            Provide[Container.catalog_directory_client]
        ),
        coordinator: OrderSagaCoordinator = Depends(Provide[Container.order_saga_coordinator]),
    ) -> Self:
        return cls(
            order_repo=order_repo,
            idempotency_repo=idempotency_repo,
            inventory_client=inventory_client,
            payment_client=payment_client,
            user_directory=user_directory,
            catalog_directory=catalog_directory,
            coordinator=coordinator,
        )

    @Logger.io
    async def create_order(
        self,
        *,
        user_id: str,
        event_id: str,
        seats: List[str],
        payment_method: PaymentMethod,
        idempotency_key: str,
    ) -> OrderWithTickets:
        fingerprint = request_fingerprint(
            user_id=user_id, event_id=event_id, seats=seats, payment_method=payment_method
        )
        replay = await self._replay(key=idempotency_key, fingerprint=fingerprint)
        if replay is not None:
            return replay

        if not await self.user_directory.exists(entity_id=user_id):
            raise NotFoundError('User not found', user_id=user_id)
        if not await self.catalog_directory.exists(entity_id=event_id):
            raise NotFoundError('Event not found', event_id=event_id)

        order_id = str(uuid_utils.uuid7())
        started = await self.idempotency_repo.start(
            record=OrderIdempotencyRecord.start(
                key=idempotency_key,
                request_fingerprint=fingerprint,
                order_id=order_id,
                ttl_seconds=settings.IDEMPOTENCY_TTL_SECONDS,
            )
        )
        if not started:
            raise ConflictError('request already in progress', idempotency_key=idempotency_key)

        with self.tracer.start_as_current_span(
            'use_case.create_order',
            attributes={'order.id': order_id, 'event.id': event_id, 'seat.count': len(seats)},
        ):
            try:
                result = await self._run_saga(
                    order=Order.create(
                        order_id=order_id,
                        user_id=user_id,
                        event_id=event_id,
                        seats=seats,
                        payment_method=payment_method,
                        idempotency_key=idempotency_key,
                    )
                )
            except Exception:
                await self.idempotency_repo.discard(key=idempotency_key)
                raise

            await self.idempotency_repo.complete(
                key=idempotency_key,
                expires_at=datetime.now(timezone.utc)
                + timedelta(seconds=settings.IDEMPOTENCY_TTL_SECONDS),
            )
            Logger.base.info(f'✅ [ORDER] Order {order_id} confirmed, total {result.order.total}')
            return result

    async def _replay(self, *, key: str, fingerprint: str) -> OrderWithTickets | None:
        record = await self.idempotency_repo.get(key=key)
        if record is None or record.is_expired():
            return None
        if record.request_fingerprint != fingerprint:
            raise ConflictError('idempotency key reused with a different request', idempotency_key=key)
        if record.status == IdempotencyStatus.IN_PROGRESS:
            raise ConflictError('request already in progress', idempotency_key=key)

        order = await self.order_repo.get_by_id(order_id=record.order_id)
        if order is None:
            raise InternalError('Idempotent order record is missing', order_id=record.order_id)
        Logger.base.info(f'♻️ [ORDER] Replaying order {order.order_id} for key {key}')
        tickets = await self.order_repo.list_tickets(order_id=order.order_id)
        return OrderWithTickets(order=order, tickets=tickets)

    async def _run_saga(self, *, order: Order) -> OrderWithTickets:
        order = await self.order_repo.create(order=order)

        # Reserve
        try:
            reservation = await self.inventory_client.reserve(
                order_id=order.order_id,
                event_id=order.event_id,
                seats=order.seats,
                user_id=order.user_id,
                duration_seconds=settings.HOLD_DURATION_SECONDS,
                # One reserve key per order, not per client key
                idempotency_key=f'{order.order_id}:reserve',
            )
        except UpstreamResponseError as e:
            await self.coordinator.apply(order, SagaEvent.RESERVATION_FAILED)
            raise ConflictError(
                'Seat reservation failed', order_id=order.order_id, reason=e.body
            ) from e
        except UpstreamUnavailableError:
            await self.coordinator.apply(order, SagaEvent.RESERVATION_FAILED)
            raise

        # Price
        try:
            prices = await self.inventory_client.quote_prices(
                event_id=order.event_id, seats=order.seats
            )
            if len(prices) != len(order.seats):
                raise PricingFailedError(
                    f'Expected {len(order.seats)} prices, got {len(prices)}',
                    order_id=order.order_id,
                )
        except CustomBaseError as e:
            await self.coordinator.apply(
                order, SagaEvent.PRICING_FAILED, hold_ids=reservation.hold_ids
            )
            raise PricingFailedError(
                'Failed to calculate order total', order_id=order.order_id
            ) from e

        breakdown = calculate_total(prices, tax_rate=settings.TAX_RATE)
        order = await self.coordinator.apply(
            order,
            SagaEvent.PRICED,
            hold_ids=reservation.hold_ids,
            total=breakdown.total,
            tax=breakdown.tax,
        )

        # Charge
        try:
            payment = await self.payment_client.charge(
                order_id=order.order_id,
                amount=order.total,
                method=order.payment_method,
                idempotency_key=order.idempotency_key,
            )
        except (PaymentDeclinedError, UpstreamUnavailableError):
            await self.coordinator.apply(order, SagaEvent.PAYMENT_DECLINED)
            raise
        try:
            order = await self.coordinator.apply(
                order, SagaEvent.PAYMENT_CAPTURED, payment_id=payment.payment_id
            )
        except InvalidTransitionError:
            # A payment webhook settled the order while the charge was in flight
            return await self._settled_by_callback(order, payment_id=payment.payment_id)

        # Allocate and issue
        return await self.coordinator.fulfil(order, prices=prices)

    async def _settled_by_callback(
        self, order: Order, *, payment_id: Optional[str]
    ) -> OrderWithTickets:
        """
        Re-read an order whose PAYMENT_CAPTURED lost the version race to a webhook.

        CONFIRMED: the webhook finished the saga, so its result is ours.
        CANCELLED: the charge we just made belongs to a dead order and is refunded.
        Still PENDING_PAYMENT: the webhook is mid-fulfilment; the client retries later.
        """
        fresh = await self.order_repo.get_by_id(order_id=order.order_id)
        if fresh is None:
            raise InternalError('Order disappeared during payment', order_id=order.order_id)

        if fresh.status == OrderStatus.CONFIRMED:
            Logger.base.info(f'🤝 [ORDER] Order {fresh.order_id} was confirmed by a payment callback')
            tickets = await self.order_repo.list_tickets(order_id=fresh.order_id)
            return OrderWithTickets(order=fresh, tickets=tickets)

        if fresh.status == OrderStatus.CANCELLED:
            if payment_id:
                await self.coordinator.refund(order=fresh, payment_id=payment_id)
            if fresh.payment_status == PaymentStatus.FAILED:
                raise PaymentDeclinedError(
                    'Payment was declined for this order', order_id=fresh.order_id
                )
            raise ConflictError(
                'Order was cancelled while payment was in progress', order_id=fresh.order_id
            )

        raise ConflictError('request already in progress', order_id=fresh.order_id)
