from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import anyio
import attrs
import pytest

from src.service.inventory.app.command.expire_holds_use_case import ExpireHoldsUseCase
from src.service.inventory.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.inventory.domain.enum.seat_status import HoldStatus, SeatStatus
from src.service.inventory.driving_adapter.background.hold_expiry_sweeper import (
    HoldExpirySweeper,
)
from test.service.inventory.unit.in_memory_seat_inventory import (
    EVENT_ID,
    InMemorySeatAvailabilityRepo,
)


@pytest.fixture
def reserve(uow_factory, idempotency_repo) -> ReserveSeatsUseCase:
    return ReserveSeatsUseCase(uow_factory=uow_factory, idempotency_repo=idempotency_repo)


@pytest.fixture
def use_case(uow_factory) -> ExpireHoldsUseCase:
    return ExpireHoldsUseCase(uow_factory=uow_factory)


class TestExpireHolds:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_only_holds_past_expiry_are_released(self, use_case, reserve, store):
        await reserve.reserve(
            order_id='O1', event_id=EVENT_ID, seats=['A-1-1'], duration_seconds=60
        )
        await reserve.reserve(
            order_id='O2', event_id=EVENT_ID, seats=['A-1-2'], duration_seconds=3600
        )

        released = await use_case.expire(now=datetime.now(timezone.utc) + timedelta(seconds=120))

        assert released == 1
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.AVAILABLE
        assert store.seat_status(EVENT_ID, 'A-1-2') == SeatStatus.HELD
        assert [h.status for h in store.holds_for('A-1-1')] == [HoldStatus.RELEASED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nothing_expired_releases_nothing(self, use_case, reserve, store):
        await reserve.reserve(order_id='O1', event_id=EVENT_ID, seats=['A-1-1'])

        assert await use_case.expire() == 0
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.HELD

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_second_sweep_is_harmless(self, use_case, reserve):
        await reserve.reserve(
            order_id='O1', event_id=EVENT_ID, seats=['A-1-1'], duration_seconds=1
        )
        later = datetime.now(timezone.utc) + timedelta(seconds=5)

        assert await use_case.expire(now=later) == 1
        assert await use_case.expire(now=later) == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_allocated_seat_is_left_alone(self, use_case, reserve, store):
        await reserve.reserve(
            order_id='O1', event_id=EVENT_ID, seats=['A-1-1'], duration_seconds=1
        )
        # Seat sold through another path while this hold lingered
        key = (EVENT_ID, 'A-1-1')
        store.seats[key] = attrs.evolve(store.seats[key], status=SeatStatus.ALLOCATED)

        released = await use_case.expire(now=datetime.now(timezone.utc) + timedelta(seconds=5))

        assert released == 1
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.ALLOCATED
        assert [h.status for h in store.holds_for('A-1-1')] == [HoldStatus.RELEASED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failure_mid_batch_rolls_back_every_hold(
        self, use_case, reserve, store, monkeypatch
    ):
        await reserve.reserve(
            order_id='O1', event_id=EVENT_ID, seats=['A-1-1'], duration_seconds=1
        )
        await reserve.reserve(
            order_id='O2', event_id=EVENT_ID, seats=['A-1-2'], duration_seconds=1
        )
        original = InMemorySeatAvailabilityRepo.release_if_held
        calls = []

        async def release_then_fail(self, **kwargs):
            calls.append(kwargs['seat_id'])
            if len(calls) == 2:
                raise RuntimeError('connection lost')
            return await original(self, **kwargs)

        monkeypatch.setattr(InMemorySeatAvailabilityRepo, 'release_if_held', release_then_fail)
        rollbacks = store.rollbacks

        with pytest.raises(RuntimeError):
            await use_case.expire(now=datetime.now(timezone.utc) + timedelta(seconds=5))

        assert len(calls) == 2
        assert store.rollbacks == rollbacks + 1
        assert all(hold.status == HoldStatus.HELD for hold in store.holds.values())
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.HELD
        assert store.seat_status(EVENT_ID, 'A-1-2') == SeatStatus.HELD


class TestHoldExpirySweeper:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_sweep_is_swallowed(self):
        expire = AsyncMock()
        expire.expire = AsyncMock(side_effect=RuntimeError('db down'))
        sweeper = HoldExpirySweeper(expire_holds_use_case=expire, interval_seconds=0.01)

        assert await sweeper.sweep_once() == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_run_forever_keeps_sweeping_after_a_failure(self):
        expire = AsyncMock()
        outcomes = iter([RuntimeError('db down'), 2])

        async def sweep(**_kwargs):
            outcome = next(outcomes, 0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        expire.expire = AsyncMock(side_effect=sweep)
        sweeper = HoldExpirySweeper(expire_holds_use_case=expire, interval_seconds=0.001)

        with anyio.move_on_after(0.05):
            await sweeper.run_forever()

        assert expire.expire.await_count >= 2
