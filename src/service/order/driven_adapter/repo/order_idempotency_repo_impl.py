from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, update
from sqlalchemy.dialects.postgresql import insert

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.order.app.interface.i_order_idempotency_repo import IOrderIdempotencyRepo
from src.service.order.domain.entity.order_idempotency_record_entity import (
    OrderIdempotencyRecord,
)
from src.service.order.domain.enum.idempotency_status import IdempotencyStatus
from src.service.order.driven_adapter.model.order_idempotency_model import OrderIdempotencyModel


class OrderIdempotencyRepoImpl(SessionRepo, IOrderIdempotencyRepo):
    @Logger.io
    async def get(self, *, key: str) -> Optional[OrderIdempotencyRecord]:
        async with self._get_session() as session:
            record = await session.get(OrderIdempotencyModel, key)
            if record is None:
                return None
            return OrderIdempotencyRecord(
                key=record.key,
                request_fingerprint=record.request_fingerprint,
                order_id=record.order_id,
                status=IdempotencyStatus(record.status),
                created_at=record.created_at,
                expires_at=record.expires_at,
            )

    @Logger.io
    async def start(self, *, record: OrderIdempotencyRecord) -> bool:
        async with self._get_session() as session:
            await session.execute(
                delete(OrderIdempotencyModel).where(
                    OrderIdempotencyModel.key == record.key,
                    OrderIdempotencyModel.expires_at <= datetime.now(timezone.utc),
                )
            )
            result = await session.execute(
                insert(OrderIdempotencyModel)
                .values(
                    key=record.key,
                    request_fingerprint=record.request_fingerprint,
                    order_id=record.order_id,
                    status=record.status.value,
                    created_at=record.created_at,
                    expires_at=record.expires_at,
                )
                .on_conflict_do_nothing(index_elements=['key'])
            )
            await session.commit()
            return bool(result.rowcount)  # type: ignore[attr-defined]

    @Logger.io
    async def complete(self, *, key: str, expires_at: datetime) -> None:
        async with self._get_session() as session:
            await session.execute(
                update(OrderIdempotencyModel)
                .where(OrderIdempotencyModel.key == key)
                .values(status=IdempotencyStatus.COMPLETED.value, expires_at=expires_at)
            )
            await session.commit()

    @Logger.io
    async def discard(self, *, key: str) -> None:
        async with self._get_session() as session:
            await session.execute(
                delete(OrderIdempotencyModel).where(
                    OrderIdempotencyModel.key == key,
                    OrderIdempotencyModel.status == IdempotencyStatus.IN_PROGRESS.value,
                )
            )
            await session.commit()
