"""
Order saga state machine

Every (OrderStatus, SagaEvent) pair the saga can meet is listed in TRANSITIONS.
A pair that is missing, or whose payment-status requirement does not hold, is an
InvalidTransitionError; webhook handlers rely on that as their state guard, so a
duplicate or late callback is rejected here instead of in ad hoc if-checks.

    CREATED ──PRICED──> PENDING_PAYMENT ──FULFILLED──> CONFIRMED
       │                      │
       └────── failures ──────┴──> CANCELLED
"""

from enum import StrEnum
from typing import Optional

import attrs

from src.platform.exception.exceptions import InvalidTransitionError
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.enum.order_status import OrderStatus, PaymentStatus


class SagaEvent(StrEnum):
    RESERVATION_FAILED = 'RESERVATION_FAILED'
    PRICED = 'PRICED'
    PRICING_FAILED = 'PRICING_FAILED'
    PAYMENT_CAPTURED = 'PAYMENT_CAPTURED'
    PAYMENT_DECLINED = 'PAYMENT_DECLINED'
    ALLOCATION_FAILED = 'ALLOCATION_FAILED'
    FULFILLED = 'FULFILLED'
    RESERVATION_EXPIRED = 'RESERVATION_EXPIRED'
    CANCEL_REQUESTED = 'CANCEL_REQUESTED'


class Compensation(StrEnum):
    RELEASE_SEATS = 'release_seats'
    REFUND_PAYMENT = 'refund_payment'  # only when a captured payment id exists


@attrs.frozen
class Transition:
    target: OrderStatus
    payment_status: Optional[PaymentStatus] = None  # None keeps the current value
    compensations: tuple[Compensation, ...] = ()
    requires_payment_status: Optional[PaymentStatus] = None


_CREATED = OrderStatus.CREATED
_PENDING = OrderStatus.PENDING_PAYMENT
_CANCELLED = OrderStatus.CANCELLED
_RELEASE = Compensation.RELEASE_SEATS
_REFUND = Compensation.REFUND_PAYMENT

TRANSITIONS: dict[tuple[OrderStatus, SagaEvent], Transition] = {
    (_CREATED, SagaEvent.RESERVATION_FAILED): Transition(_CANCELLED),
    (_CREATED, SagaEvent.PRICED): Transition(_PENDING),
    (_CREATED, SagaEvent.PRICING_FAILED): Transition(_CANCELLED, compensations=(_RELEASE,)),
    (_CREATED, SagaEvent.RESERVATION_EXPIRED): Transition(_CANCELLED, compensations=(_RELEASE,)),
    (_CREATED, SagaEvent.CANCEL_REQUESTED): Transition(_CANCELLED, compensations=(_RELEASE,)),
    (_PENDING, SagaEvent.PAYMENT_CAPTURED): Transition(
        _PENDING,
        payment_status=PaymentStatus.PAID,
        requires_payment_status=PaymentStatus.PENDING,
    ),
    (_PENDING, SagaEvent.PAYMENT_DECLINED): Transition(
        _CANCELLED,
        payment_status=PaymentStatus.FAILED,
        compensations=(_RELEASE,),
        requires_payment_status=PaymentStatus.PENDING,
    ),
    (_PENDING, SagaEvent.ALLOCATION_FAILED): Transition(
        _CANCELLED,
        payment_status=PaymentStatus.FAILED,
        compensations=(_REFUND, _RELEASE),
        requires_payment_status=PaymentStatus.PAID,
    ),
    (_PENDING, SagaEvent.FULFILLED): Transition(
        OrderStatus.CONFIRMED,
        payment_status=PaymentStatus.PAID,
        requires_payment_status=PaymentStatus.PAID,
    ),
    (_PENDING, SagaEvent.RESERVATION_EXPIRED): Transition(
        _CANCELLED, compensations=(_RELEASE, _REFUND)
    ),
    (_PENDING, SagaEvent.CANCEL_REQUESTED): Transition(
        _CANCELLED, compensations=(_RELEASE, _REFUND)
    ),
}


def next_transition(order: Order, event: SagaEvent) -> Transition:
    transition = TRANSITIONS.get((order.status, event))
    if transition is None or (
        transition.requires_payment_status is not None
        and order.payment_status != transition.requires_payment_status
    ):
        raise InvalidTransitionError(
            f'{event} not allowed for order in {order.status}/{order.payment_status}',
            order_id=order.order_id,
            status=order.status,
            payment_status=order.payment_status,
            saga_event=event,
        )
    return transition


def apply_transition(order: Order, transition: Transition, **changes) -> Order:
    """New order version with the transition's status fields plus any extra changes"""
    if transition.payment_status is not None:
        changes.setdefault('payment_status', transition.payment_status)
    return order.evolve(status=transition.target, **changes)
