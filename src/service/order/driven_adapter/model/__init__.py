"""
Order database models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.order.driven_adapter.model.order_idempotency_model import OrderIdempotencyModel
from src.service.order.driven_adapter.model.order_model import OrderModel
from src.service.order.driven_adapter.model.ticket_model import TicketModel


__all__ = [
    'OrderIdempotencyModel',
    'OrderModel',
    'TicketModel',
]
