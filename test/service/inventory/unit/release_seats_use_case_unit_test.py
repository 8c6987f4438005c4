import pytest

from src.platform.exception.exceptions import ValidationError
from src.service.inventory.app.command.allocate_seats_use_case import AllocateSeatsUseCase
from src.service.inventory.app.command.release_seats_use_case import ReleaseSeatsUseCase
from src.service.inventory.app.command.reserve_seats_use_case import ReserveSeatsUseCase
from src.service.inventory.domain.enum.seat_status import HoldStatus, SeatStatus
from test.service.inventory.unit.in_memory_seat_inventory import EVENT_ID


@pytest.fixture
def reserve(uow_factory, idempotency_repo) -> ReserveSeatsUseCase:
    return ReserveSeatsUseCase(uow_factory=uow_factory, idempotency_repo=idempotency_repo)


@pytest.fixture
def use_case(uow_factory) -> ReleaseSeatsUseCase:
    return ReleaseSeatsUseCase(uow_factory=uow_factory)


class TestReleaseByHoldIds:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_releases_hold_and_seat(self, use_case, reserve, store):
        reserved = await reserve.reserve(order_id='O1', event_id=EVENT_ID, seats=['A-1-1'])

        result = await use_case.release(hold_ids=reserved.body['holdIds'])

        assert (result.released_holds, result.released_seats) == (1, 1)
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.AVAILABLE
        assert [h.status for h in store.holds_for('A-1-1')] == [HoldStatus.RELEASED]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_second_release_is_a_no_op(self, use_case, reserve, store):
        reserved = await reserve.reserve(order_id='O1', event_id=EVENT_ID, seats=['A-1-1'])
        await use_case.release(hold_ids=reserved.body['holdIds'])

        result = await use_case.release(hold_ids=reserved.body['holdIds'])

        assert (result.released_holds, result.released_seats) == (0, 0)
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.AVAILABLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stale_hold_does_not_free_a_seat_held_by_another_order(
        self, use_case, reserve, store
    ):
        first = await reserve.reserve(order_id='O1', event_id=EVENT_ID, seats=['A-1-1'])
        await use_case.release(hold_ids=first.body['holdIds'])
        await reserve.reserve(order_id='O2', event_id=EVENT_ID, seats=['A-1-1'])

        await use_case.release(hold_ids=first.body['holdIds'])

        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.HELD

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unknown_hold_ids_are_ignored(self, use_case):
        result = await use_case.release(hold_ids=['missing'])

        assert (result.released_holds, result.released_seats) == (0, 0)


class TestReleaseBySeats:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_releases_held_seats(self, use_case, reserve, store):
        await reserve.reserve(order_id='O1', event_id=EVENT_ID, seats=['A-1-1', 'A-1-2'])

        result = await use_case.release(seats=['A-1-1', 'A-1-2'], event_id=EVENT_ID)

        assert (result.released_holds, result.released_seats) == (2, 2)
        assert store.seat_status(EVENT_ID, 'A-1-2') == SeatStatus.AVAILABLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_allocated_seat_is_never_released(self, use_case, reserve, uow_factory, store):
        await reserve.reserve(order_id='O1', event_id=EVENT_ID, seats=['A-1-1'])
        await AllocateSeatsUseCase(uow_factory=uow_factory).allocate(
            order_id='O1', event_id=EVENT_ID, seats=['A-1-1']
        )

        result = await use_case.release(seats=['A-1-1'], event_id=EVENT_ID)

        assert result.released_seats == 0
        assert store.seat_status(EVENT_ID, 'A-1-1') == SeatStatus.ALLOCATED

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_needs_hold_ids_or_seats(self, use_case):
        with pytest.raises(ValidationError):
            await use_case.release()
