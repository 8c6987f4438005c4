from datetime import datetime, timedelta, timezone
from typing import Optional

import attrs
import uuid_utils

from src.service.inventory.domain.enum.seat_status import HoldStatus


@attrs.define
class SeatHold:
    hold_id: str
    order_id: str
    event_id: str
    seat_id: str
    created_at: datetime
    expires_at: datetime
    user_id: Optional[str] = None
    idempotency_key: Optional[str] = None
    status: HoldStatus = HoldStatus.HELD

    @classmethod
    def create(
        cls,
        *,
        order_id: str,
        event_id: str,
        seat_id: str,
        duration_seconds: int,
        user_id: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> 'SeatHold':
        created_at = now or datetime.now(timezone.utc)
        return cls(
            hold_id=str(uuid_utils.uuid7()),
            order_id=order_id,
            event_id=event_id,
            seat_id=seat_id,
            user_id=user_id,
            idempotency_key=idempotency_key,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=duration_seconds),
        )

    def is_expired(self, *, now: datetime) -> bool:
        return self.status == HoldStatus.HELD and self.expires_at <= now
