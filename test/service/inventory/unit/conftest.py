from typing import Callable
from unittest.mock import AsyncMock

import pytest

from src.service.inventory.app.dto.stored_response import StoredResponse
from test.service.inventory.unit.in_memory_seat_inventory import (
    EVENT_ID,
    InMemorySeatInventoryUnitOfWork,
    InMemorySeatStore,
)


@pytest.fixture
def store() -> InMemorySeatStore:
    store = InMemorySeatStore()
    for seat_id, price in (('A-1-1', '100.00'), ('A-1-2', '100.00'), ('A-1-3', '250.00')):
        store.add_seat(event_id=EVENT_ID, seat_id=seat_id, price=price)
    return store


@pytest.fixture
def uow_factory(store: InMemorySeatStore) -> Callable[[], InMemorySeatInventoryUnitOfWork]:
    return lambda: InMemorySeatInventoryUnitOfWork(store)


@pytest.fixture
def idempotency_repo() -> AsyncMock:
    """Dict-backed response cache; first writer wins"""
    cache: dict[str, StoredResponse] = {}

    async def get(*, idempotency_key: str) -> StoredResponse | None:
        return cache.get(idempotency_key)

    async def save(*, idempotency_key: str, response: StoredResponse) -> None:
        cache.setdefault(idempotency_key, response)

    repo = AsyncMock()
    repo.get = AsyncMock(side_effect=get)
    repo.save = AsyncMock(side_effect=save)
    repo.cache = cache
    return repo
