from typing import Optional

from sqlalchemy.dialects.postgresql import insert

from src.platform.database.session_repo import SessionRepo
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.dto.stored_response import StoredResponse
from src.service.inventory.app.interface.i_idempotency_response_repo import (
    IIdempotencyResponseRepo,
)
from src.service.inventory.driven_adapter.model.idempotency_response_model import (
    IdempotencyResponseModel,
)


class IdempotencyResponseRepoImpl(SessionRepo, IIdempotencyResponseRepo):
    """Runs in its own short transaction, after the seat transaction has committed or rolled back"""

    @Logger.io
    async def get(self, *, idempotency_key: str) -> Optional[StoredResponse]:
        async with self._get_session() as session:
            record = await session.get(IdempotencyResponseModel, idempotency_key)
            if record is None:
                return None
            return StoredResponse(status_code=record.response_code, body=record.response_body)

    @Logger.io
    async def save(self, *, idempotency_key: str, response: StoredResponse) -> None:
        async with self._get_session() as session:
            await session.execute(
                insert(IdempotencyResponseModel)
                .values(
                    idempotency_key=idempotency_key,
                    response_code=response.status_code,
                    response_body=response.body,
                )
                .on_conflict_do_nothing(index_elements=['idempotency_key'])
            )
            await session.commit()
