from datetime import datetime, timezone
from decimal import Decimal

import attrs
import uuid_utils


@attrs.frozen
class Ticket:
    ticket_id: str
    order_id: str
    event_id: str
    seat: str
    price: Decimal
    issued_at: datetime

    @classmethod
    def issue(cls, *, order_id: str, event_id: str, seat: str, price: Decimal) -> 'Ticket':
        return cls(
            ticket_id=str(uuid_utils.uuid7()),
            order_id=order_id,
            event_id=event_id,
            seat=seat,
            price=price,
            issued_at=datetime.now(timezone.utc),
        )
