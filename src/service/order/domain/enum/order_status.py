from enum import StrEnum


class OrderStatus(StrEnum):
    CREATED = 'CREATED'
    PENDING_PAYMENT = 'PENDING_PAYMENT'
    CONFIRMED = 'CONFIRMED'
    CANCELLED = 'CANCELLED'


class PaymentStatus(StrEnum):
    PENDING = 'PENDING'
    PAID = 'PAID'
    FAILED = 'FAILED'


class PaymentMethod(StrEnum):
    UPI = 'UPI'
    CARD = 'CARD'
    NETBANKING = 'NETBANKING'
