"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring, per service.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.inventory.app.command import (
    allocate_seats_use_case,
    release_seats_use_case,
    reserve_seats_use_case,
)
from src.service.inventory.app.query import (
    get_hold_use_case,
    list_seats_use_case,
    quote_seat_prices_use_case,
)
from src.service.order.app.command import (
    cancel_order_use_case,
    create_order_use_case,
    handle_payment_callback_use_case,
    handle_reservation_callback_use_case,
)
from src.service.order.app.query import get_order_use_case


INVENTORY_WIRE_MODULES: list[ModuleType] = [
    reserve_seats_use_case,
    allocate_seats_use_case,
    release_seats_use_case,
    quote_seat_prices_use_case,
    list_seats_use_case,
    get_hold_use_case,
]

ORDER_WIRE_MODULES: list[ModuleType] = [
    create_order_use_case,
    cancel_order_use_case,
    handle_payment_callback_use_case,
    handle_reservation_callback_use_case,
    get_order_use_case,
]
