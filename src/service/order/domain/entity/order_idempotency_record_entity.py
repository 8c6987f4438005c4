from datetime import datetime, timedelta, timezone
from typing import Optional

import attrs

from src.service.order.domain.enum.idempotency_status import IdempotencyStatus


@attrs.define
class OrderIdempotencyRecord:
    """
    Saga-started marker for one Idempotency-Key.

    IN_PROGRESS is written before the first side effect; COMPLETED once the order is
    confirmed. Both expire, so a crashed attempt cannot block its key forever.
    """

    key: str
    request_fingerprint: str
    order_id: str
    created_at: datetime
    expires_at: datetime
    status: IdempotencyStatus = IdempotencyStatus.IN_PROGRESS

    @classmethod
    def start(
        cls, *, key: str, request_fingerprint: str, order_id: str, ttl_seconds: int
    ) -> 'OrderIdempotencyRecord':
        now = datetime.now(timezone.utc)
        return cls(
            key=key,
            request_fingerprint=request_fingerprint,
            order_id=order_id,
            created_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )

    def is_expired(self, *, now: Optional[datetime] = None) -> bool:
        return self.expires_at <= (now or datetime.now(timezone.utc))
