from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

import attrs

from src.platform.exception.exceptions import HoldConflictError, SeatUnavailableError
from src.service.inventory.domain.enum.seat_status import SeatStatus


@attrs.define
class SeatAvailability:
    """
    One physical seat for one event.

    Status only moves AVAILABLE -> HELD -> ALLOCATED or HELD -> AVAILABLE;
    an ALLOCATED seat never changes again.
    """

    event_id: str
    seat_id: str
    section: str
    row: str
    seat_number: int
    price: Decimal
    status: SeatStatus = SeatStatus.AVAILABLE
    last_updated: Optional[datetime] = None

    def hold(self) -> 'SeatAvailability':
        if self.status != SeatStatus.AVAILABLE:
            raise SeatUnavailableError(
                f'Seat {self.seat_id} not available', seat_id=self.seat_id, status=self.status
            )
        return attrs.evolve(self, status=SeatStatus.HELD)

    def allocate(self) -> 'SeatAvailability':
        if self.status != SeatStatus.HELD:
            raise HoldConflictError(
                f'Seat {self.seat_id} is not held', seat_id=self.seat_id, status=self.status
            )
        return attrs.evolve(self, status=SeatStatus.ALLOCATED)

    def snapshot(self) -> dict[str, Any]:
        return {
            'seat_id': self.seat_id,
            'section': self.section,
            'row': self.row,
            'seat_number': self.seat_number,
            'price': float(self.price),
        }
