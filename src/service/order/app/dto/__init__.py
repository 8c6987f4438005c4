"""Application layer DTOs"""

from src.service.order.app.dto.inventory_dto import Reservation
from src.service.order.app.dto.order_with_tickets import OrderWithTickets
from src.service.order.app.dto.payment_dto import PaymentResult


__all__ = [
    'OrderWithTickets',
    'PaymentResult',
    'Reservation',
]
