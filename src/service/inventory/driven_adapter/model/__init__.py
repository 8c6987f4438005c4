"""
Seat inventory database models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.inventory.driven_adapter.model.idempotency_response_model import (
    IdempotencyResponseModel,
)
from src.service.inventory.driven_adapter.model.seat_allocation_model import SeatAllocationModel
from src.service.inventory.driven_adapter.model.seat_availability_model import (
    SeatAvailabilityModel,
)
from src.service.inventory.driven_adapter.model.seat_hold_model import SeatHoldModel


__all__ = [
    'IdempotencyResponseModel',
    'SeatAllocationModel',
    'SeatAvailabilityModel',
    'SeatHoldModel',
]
