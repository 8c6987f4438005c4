from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional

import attrs
import uuid_utils

from src.service.order.domain.enum.order_status import OrderStatus, PaymentMethod, PaymentStatus


@attrs.define
class Order:
    order_id: str
    user_id: str
    event_id: str
    seats: List[str]
    payment_method: PaymentMethod
    idempotency_key: str
    total: Decimal = Decimal('0')
    tax: Decimal = Decimal('0')
    status: OrderStatus = OrderStatus.CREATED
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_id: Optional[str] = None
    hold_ids: List[str] = attrs.field(factory=list)
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        user_id: str,
        event_id: str,
        seats: List[str],
        payment_method: PaymentMethod,
        idempotency_key: str,
        order_id: Optional[str] = None,
    ) -> 'Order':
        now = datetime.now(timezone.utc)
        return cls(
            order_id=order_id or str(uuid_utils.uuid7()),
            user_id=user_id,
            event_id=event_id,
            seats=list(seats),
            payment_method=payment_method,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status in (OrderStatus.CONFIRMED, OrderStatus.CANCELLED)

    def evolve(self, **changes: Any) -> 'Order':
        """Next version of the order; the stored row must still be at self.version"""
        return attrs.evolve(
            self, version=self.version + 1, updated_at=datetime.now(timezone.utc), **changes
        )
