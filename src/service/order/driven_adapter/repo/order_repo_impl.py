from typing import List, Optional, Sequence

from sqlalchemy import select, update

from src.platform.database.session_repo import SessionRepo
from src.platform.exception.exceptions import OrderVersionConflictError
from src.platform.logging.loguru_io import Logger
from src.service.order.app.interface.i_order_repo import IOrderRepo
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.entity.ticket_entity import Ticket
from src.service.order.domain.enum.order_status import OrderStatus, PaymentMethod, PaymentStatus
from src.service.order.driven_adapter.model.order_model import OrderModel
from src.service.order.driven_adapter.model.ticket_model import TicketModel


class OrderRepoImpl(SessionRepo, IOrderRepo):
    @staticmethod
    def _to_entity(db_order: OrderModel) -> Order:
        return Order(
            order_id=db_order.order_id,
            user_id=db_order.user_id,
            event_id=db_order.event_id,
            seats=list(db_order.seats or []),
            hold_ids=list(db_order.hold_ids or []),
            total=db_order.total,
            tax=db_order.tax,
            status=OrderStatus(db_order.status),
            payment_status=PaymentStatus(db_order.payment_status),
            payment_id=db_order.payment_id,
            payment_method=PaymentMethod(db_order.payment_method),
            idempotency_key=db_order.idempotency_key,
            version=db_order.version,
            created_at=db_order.created_at,
            updated_at=db_order.updated_at,
        )

    @staticmethod
    def _ticket_to_entity(db_ticket: TicketModel) -> Ticket:
        return Ticket(
            ticket_id=db_ticket.ticket_id,
            order_id=db_ticket.order_id,
            event_id=db_ticket.event_id,
            seat=db_ticket.seat,
            price=db_ticket.price,
            issued_at=db_ticket.issued_at,
        )

    @staticmethod
    def _mutable_columns(order: Order) -> dict:
        return {
            'seats': order.seats,
            'hold_ids': order.hold_ids,
            'total': order.total,
            'tax': order.tax,
            'status': order.status.value,
            'payment_status': order.payment_status.value,
            'payment_id': order.payment_id,
            'version': order.version,
            'updated_at': order.updated_at,
        }

    @Logger.io
    async def create(self, *, order: Order) -> Order:
        async with self._get_session() as session:
            session.add(
                OrderModel(
                    order_id=order.order_id,
                    user_id=order.user_id,
                    event_id=order.event_id,
                    payment_method=order.payment_method.value,
                    idempotency_key=order.idempotency_key,
                    created_at=order.created_at,
                    **self._mutable_columns(order),
                )
            )
            await session.commit()
            return order

    @Logger.io
    async def get_by_id(self, *, order_id: str) -> Optional[Order]:
        async with self._get_session() as session:
            db_order = await session.get(OrderModel, order_id)
            return self._to_entity(db_order) if db_order else None

    @Logger.io
    async def save(
        self, *, order: Order, expected_version: int, tickets: Sequence[Ticket] = ()
    ) -> Order:
        async with self._get_session() as session:
            result = await session.execute(
                update(OrderModel)
                .where(
                    OrderModel.order_id == order.order_id,
                    OrderModel.version == expected_version,
                )
                .values(**self._mutable_columns(order))
            )
            if not result.rowcount:  # type: ignore[attr-defined]
                await session.rollback()
                raise OrderVersionConflictError(
                    f'Order {order.order_id} is no longer at version {expected_version}',
                    order_id=order.order_id,
                    expected_version=expected_version,
                )

            session.add_all(
                TicketModel(
                    ticket_id=ticket.ticket_id,
                    order_id=ticket.order_id,
                    event_id=ticket.event_id,
                    seat=ticket.seat,
                    price=ticket.price,
                    issued_at=ticket.issued_at,
                )
                for ticket in tickets
            )
            await session.commit()
            return order

    @Logger.io
    async def list_tickets(self, *, order_id: str) -> List[Ticket]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TicketModel)
                .where(TicketModel.order_id == order_id)
                .order_by(TicketModel.issued_at, TicketModel.ticket_id)
            )
            return [self._ticket_to_entity(db_ticket) for db_ticket in result.scalars().all()]
