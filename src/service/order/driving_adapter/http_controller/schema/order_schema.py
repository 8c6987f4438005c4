from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.service.order.app.dto.order_with_tickets import OrderWithTickets
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.entity.ticket_entity import Ticket
from src.service.order.domain.enum.order_status import PaymentMethod


class CamelModel(BaseModel):
    """Wire format is camelCase; python attributes stay snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderCreateRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'userId': 'U1',
                'eventId': 'E1',
                'seats': ['A-1-1', 'A-1-2'],
                'paymentMethod': 'CARD',
            }
        }
    )

    user_id: str = Field(min_length=1)
    event_id: str = Field(min_length=1)
    seats: List[str] = Field(min_length=1)
    payment_method: PaymentMethod


class TicketResponse(CamelModel):
    ticket_id: str
    order_id: str
    event_id: str
    seat: str
    price: float
    issued_at: datetime

    @classmethod
    def from_entity(cls, ticket: Ticket) -> 'TicketResponse':
        return cls(
            ticket_id=ticket.ticket_id,
            order_id=ticket.order_id,
            event_id=ticket.event_id,
            seat=ticket.seat,
            price=float(ticket.price),
            issued_at=ticket.issued_at,
        )


class OrderResponse(CamelModel):
    order_id: str
    user_id: str
    event_id: str
    seats: List[str]
    total: float
    tax: float
    status: str
    payment_status: str
    payment_id: Optional[str] = None
    payment_method: str
    version: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, order: Order) -> 'OrderResponse':
        return cls(
            order_id=order.order_id,
            user_id=order.user_id,
            event_id=order.event_id,
            seats=order.seats,
            total=float(order.total),
            tax=float(order.tax),
            status=order.status.value,
            payment_status=order.payment_status.value,
            payment_id=order.payment_id,
            payment_method=order.payment_method.value,
            version=order.version,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderWithTicketsResponse(CamelModel):
    order: OrderResponse
    tickets: List[TicketResponse]

    @classmethod
    def from_dto(cls, result: OrderWithTickets) -> 'OrderWithTicketsResponse':
        return cls(
            order=OrderResponse.from_entity(result.order),
            tickets=[TicketResponse.from_entity(ticket) for ticket in result.tickets],
        )


class OrderCancelResponse(CamelModel):
    order: OrderResponse


class PaymentWebhookRequest(CamelModel):
    order_id: str = Field(min_length=1)
    status: Literal['PAID', 'FAILED']
    payment_id: Optional[str] = None


class ReservationWebhookRequest(CamelModel):
    order_id: str = Field(min_length=1)
    seats: Optional[List[str]] = None
    action: Literal['EXPIRED']


class WebhookAckResponse(CamelModel):
    received: bool = True
