from datetime import datetime, timezone
from typing import Any

import attrs
import uuid_utils


@attrs.define
class SeatAllocation:
    """Append-only record of one successful allocate call"""

    allocation_id: str
    order_id: str
    event_id: str
    seats: list[dict[str, Any]]
    created_at: datetime

    @classmethod
    def create(cls, *, order_id: str, event_id: str, seats: list[dict[str, Any]]) -> 'SeatAllocation':
        return cls(
            allocation_id=str(uuid_utils.uuid7()),
            order_id=order_id,
            event_id=event_id,
            seats=seats,
            created_at=datetime.now(timezone.utc),
        )
