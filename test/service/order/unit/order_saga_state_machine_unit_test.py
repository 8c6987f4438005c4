import pytest

from src.platform.exception.exceptions import InvalidTransitionError
from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.enum.order_status import OrderStatus, PaymentMethod, PaymentStatus
from src.service.order.domain.saga.order_saga_state_machine import (
    TRANSITIONS,
    Compensation,
    SagaEvent,
    apply_transition,
    next_transition,
)


def _order(
    status: OrderStatus = OrderStatus.CREATED,
    payment_status: PaymentStatus = PaymentStatus.PENDING,
) -> Order:
    order = Order.create(
        user_id='U1',
        event_id='E1',
        seats=['A-1-1'],
        payment_method=PaymentMethod.CARD,
        idempotency_key='k',
    )
    order.status = status
    order.payment_status = payment_status
    return order


@pytest.mark.unit
def test_terminal_states_admit_no_event():
    for status in (OrderStatus.CONFIRMED, OrderStatus.CANCELLED):
        for event in SagaEvent:
            with pytest.raises(InvalidTransitionError):
                next_transition(_order(status), event)


@pytest.mark.unit
def test_happy_path():
    order = _order()
    order = apply_transition(order, next_transition(order, SagaEvent.PRICED))
    assert order.status == OrderStatus.PENDING_PAYMENT

    order = apply_transition(
        order, next_transition(order, SagaEvent.PAYMENT_CAPTURED), payment_id='pay_1'
    )
    assert (order.status, order.payment_status) == (OrderStatus.PENDING_PAYMENT, PaymentStatus.PAID)
    assert order.payment_id == 'pay_1'

    order = apply_transition(order, next_transition(order, SagaEvent.FULFILLED))
    assert (order.status, order.payment_status) == (OrderStatus.CONFIRMED, PaymentStatus.PAID)
    assert order.version == 4


@pytest.mark.unit
def test_duplicate_payment_capture_is_rejected():
    order = _order(OrderStatus.PENDING_PAYMENT, PaymentStatus.PAID)

    with pytest.raises(InvalidTransitionError):
        next_transition(order, SagaEvent.PAYMENT_CAPTURED)


@pytest.mark.unit
def test_fulfil_requires_captured_payment():
    with pytest.raises(InvalidTransitionError):
        next_transition(_order(OrderStatus.PENDING_PAYMENT), SagaEvent.FULFILLED)


@pytest.mark.unit
@pytest.mark.parametrize(
    'status,event,compensations',
    [
        (OrderStatus.CREATED, SagaEvent.RESERVATION_FAILED, ()),
        (OrderStatus.CREATED, SagaEvent.PRICING_FAILED, (Compensation.RELEASE_SEATS,)),
        (OrderStatus.PENDING_PAYMENT, SagaEvent.PAYMENT_DECLINED, (Compensation.RELEASE_SEATS,)),
        (
            OrderStatus.PENDING_PAYMENT,
            SagaEvent.RESERVATION_EXPIRED,
            (Compensation.RELEASE_SEATS, Compensation.REFUND_PAYMENT),
        ),
    ],
)
def test_failure_events_cancel_with_compensations(status, event, compensations):
    transition = next_transition(_order(status), event)

    assert transition.target == OrderStatus.CANCELLED
    assert transition.compensations == compensations


@pytest.mark.unit
def test_allocation_failure_refunds_then_releases():
    order = _order(OrderStatus.PENDING_PAYMENT, PaymentStatus.PAID)

    transition = next_transition(order, SagaEvent.ALLOCATION_FAILED)

    assert transition.target == OrderStatus.CANCELLED
    assert transition.payment_status == PaymentStatus.FAILED
    assert transition.compensations == (Compensation.REFUND_PAYMENT, Compensation.RELEASE_SEATS)


@pytest.mark.unit
def test_only_created_and_pending_orders_have_transitions():
    assert {status for status, _ in TRANSITIONS} == {
        OrderStatus.CREATED,
        OrderStatus.PENDING_PAYMENT,
    }
