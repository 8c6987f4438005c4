from decimal import Decimal
from typing import Any, Awaitable, Callable, Sequence

from opentelemetry import trace

from src.platform.exception.exceptions import (
    AllocationFailedError,
    CustomBaseError,
    OrderVersionConflictError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.ticketing_metrics import metrics
from src.service.order.app.dto.order_with_tickets import OrderWithTickets
from src.service.order.app.interface.i_inventory_client import IInventoryClient
from src.service.order.app.interface.i_order_repo import IOrderRepo
from src.service.order.app.interface.i_payment_client import IPaymentClient
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.entity.ticket_entity import Ticket
from src.service.order.domain.enum.order_status import PaymentStatus
from src.service.order.domain.saga.order_saga_state_machine import (
    Compensation,
    SagaEvent,
    apply_transition,
    next_transition,
)


MAX_WRITE_ATTEMPTS = 3


class OrderSagaCoordinator:
    """
    The only writer of Order state.

    apply() looks the event up in the transition table, persists the new order with a
    version compare-and-swap and then runs the transition's compensations. On a
    version conflict the order is re-read and the event re-evaluated; if the fresh
    state no longer admits it, InvalidTransitionError propagates (the other writer won).

    Compensations are best-effort: failures are logged and counted, never raised.
    """

    def __init__(
        self,
        *,
        order_repo: IOrderRepo,
        inventory_client: IInventoryClient,
        payment_client: IPaymentClient,
    ) -> None:
        self.order_repo = order_repo
        self.inventory_client = inventory_client
        self.payment_client = payment_client
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def apply(
        self,
        order: Order,
        event: SagaEvent,
        *,
        tickets: Sequence[Ticket] = (),
        **changes: Any,
    ) -> Order:
        with self.tracer.start_as_current_span(
            'saga.apply', attributes={'order.id': order.order_id, 'saga.event': event.value}
        ):
            current = order
            attempt = 1
            while True:
                transition = next_transition(current, event)
                updated = apply_transition(current, transition, **changes)
                try:
                    saved = await self.order_repo.save(
                        order=updated, expected_version=current.version, tickets=tickets
                    )
                    break
                except OrderVersionConflictError:
                    fresh = await self.order_repo.get_by_id(order_id=order.order_id)
                    if fresh is None or attempt >= MAX_WRITE_ATTEMPTS:
                        raise
                    Logger.base.warning(
                        f'🔁 [SAGA] Order {order.order_id} changed concurrently, re-reading '
                        f'({attempt}/{MAX_WRITE_ATTEMPTS})'
                    )
                    current = fresh
                    attempt += 1

            Logger.base.info(
                f'🧭 [SAGA] Order {order.order_id}: {current.status} --{event}--> '
                f'{saved.status} (payment {saved.payment_status})'
            )
            await self._compensate(
                before=current, after=saved, compensations=transition.compensations
            )
            return saved

    async def _compensate(
        self, *, before: Order, after: Order, compensations: Sequence[Compensation]
    ) -> None:
        for compensation in compensations:
            if compensation == Compensation.REFUND_PAYMENT:
                if before.payment_status != PaymentStatus.PAID or after.payment_id is None:
                    continue
                await self.refund(order=after, payment_id=after.payment_id)
            elif compensation == Compensation.RELEASE_SEATS:
                await self._best_effort(compensation, after, lambda: self._release(after))

    async def refund(self, *, order: Order, payment_id: str) -> None:
        """Best-effort refund of a captured payment; failures are logged and counted"""
        await self._best_effort(
            Compensation.REFUND_PAYMENT,
            order,
            lambda: self.payment_client.refund(payment_id=payment_id),
        )

    async def _best_effort(
        self,
        compensation: Compensation,
        order: Order,
        action: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            await action()
            Logger.base.info(f'↩️ [SAGA] {compensation} done for order {order.order_id}')
        except Exception as e:
            metrics.record_compensation_failure(action=compensation.value)
            Logger.base.error(f'❌ [SAGA] {compensation} failed for order {order.order_id}: {e}')

    async def _release(self, order: Order) -> None:
        await self.inventory_client.release(
            order_id=order.order_id,
            event_id=order.event_id,
            seats=order.seats,
            hold_ids=order.hold_ids or None,
        )

    @Logger.io
    async def fulfil(self, order: Order, *, prices: Sequence[Decimal]) -> OrderWithTickets:
        """
        Allocate the held seats, then issue one ticket per seat and confirm the order.

        Raises:
            AllocationFailedError: inventory refused or was unreachable; the order is
                cancelled with refund and release compensations
        """
        try:
            await self.inventory_client.allocate(
                order_id=order.order_id,
                event_id=order.event_id,
                seats=order.seats,
                hold_ids=order.hold_ids or None,
            )
        except CustomBaseError as e:
            Logger.base.error(f'❌ [SAGA] Allocation failed for order {order.order_id}: {e}')
            await self.apply(order, SagaEvent.ALLOCATION_FAILED)
            raise AllocationFailedError(
                'Seat allocation failed', order_id=order.order_id
            ) from e

        tickets = [
            Ticket.issue(order_id=order.order_id, event_id=order.event_id, seat=seat, price=price)
            for seat, price in zip(order.seats, prices)
        ]
        confirmed = await self.apply(order, SagaEvent.FULFILLED, tickets=tickets)
        return OrderWithTickets(order=confirmed, tickets=tickets)
