from decimal import Decimal

import httpx
import orjson
import pytest

from src.platform.exception.exceptions import (
    PaymentDeclinedError,
    UpstreamResponseError,
    UpstreamUnavailableError,
)
from src.platform.http.retry_policy import RetryPolicy
from src.platform.http.service_http_client import ServiceHttpClient
from src.service.order.domain.enum.order_status import PaymentMethod
from src.service.order.driven_adapter.client.directory_client_impl import DirectoryClientImpl
from src.service.order.driven_adapter.client.inventory_client_impl import InventoryClientImpl
from src.service.order.driven_adapter.client.payment_client_impl import PaymentClientImpl


class RecordingTransport:
    """Answers every request with the next canned response and keeps what was sent"""

    def __init__(self, *responses: httpx.Response) -> None:
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.pop(0)

    def body(self, index: int = 0) -> dict:
        return orjson.loads(self.requests[index].content)


def _http(transport: RecordingTransport, *, attempts: int = 3) -> ServiceHttpClient:
    return ServiceHttpClient(
        name='test',
        base_url='http://upstream',
        retry_policy=RetryPolicy(attempts=attempts, delay_seconds=0),
        transport=httpx.MockTransport(transport),
    )


class TestInventoryClient:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reserve_sends_idempotency_key_and_camel_case_body(self):
        transport = RecordingTransport(
            httpx.Response(200, json={'ok': True, 'holdIds': ['h1'], 'expiresAt': '2026-01-01'})
        )
        client = InventoryClientImpl(http=_http(transport))

        reservation = await client.reserve(
            order_id='O1',
            event_id='E1',
            seats=['A-1-1'],
            duration_seconds=900,
            idempotency_key='O1:reserve',
            user_id='U1',
        )

        assert reservation.hold_ids == ['h1']
        request = transport.requests[0]
        assert request.url.path == '/reserve'
        assert request.headers['Idempotency-Key'] == 'O1:reserve'
        assert transport.body() == {
            'orderId': 'O1',
            'eventId': 'E1',
            'seats': ['A-1-1'],
            'durationSeconds': 900,
            'userId': 'U1',
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_reserve_conflict_surfaces_upstream_body(self):
        body = {'error': 'seat_unavailable', 'detail': 'Seat not available', 'seatId': 'A-1-1'}
        transport = RecordingTransport(httpx.Response(409, json=body))
        client = InventoryClientImpl(http=_http(transport))

        with pytest.raises(UpstreamResponseError) as exc_info:
            await client.reserve(
                order_id='O1',
                event_id='E1',
                seats=['A-1-1'],
                duration_seconds=900,
                idempotency_key='O1:reserve',
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.body == body
        assert len(transport.requests) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_quote_prices_are_decimals(self):
        transport = RecordingTransport(httpx.Response(200, json={'prices': [100.0, 250.5]}))
        client = InventoryClientImpl(http=_http(transport))

        prices = await client.quote_prices(event_id='E1', seats=['A-1-1', 'A-1-3'])

        assert prices == [Decimal('100.0'), Decimal('250.5')]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_release_prefers_hold_ids(self):
        transport = RecordingTransport(httpx.Response(200, json={'ok': True}))
        client = InventoryClientImpl(http=_http(transport))

        await client.release(order_id='O1', event_id='E1', seats=['A-1-1'], hold_ids=['h1'])

        assert transport.body() == {'holdIds': ['h1'], 'orderId': 'O1'}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_release_falls_back_to_seats(self):
        transport = RecordingTransport(httpx.Response(200, json={'ok': True}))
        client = InventoryClientImpl(http=_http(transport))

        await client.release(order_id='O1', event_id='E1', seats=['A-1-1'])

        assert transport.body() == {'seats': ['A-1-1'], 'eventId': 'E1', 'orderId': 'O1'}


class TestPaymentClient:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_charge_success(self):
        transport = RecordingTransport(
            httpx.Response(200, json={'payment_id': 'pay_1', 'status': 'success'})
        )
        client = PaymentClientImpl(http=_http(transport))

        result = await client.charge(
            order_id='O1', amount=Decimal('105.00'), method=PaymentMethod.UPI, idempotency_key='k1'
        )

        assert result.payment_id == 'pay_1'
        assert transport.requests[0].url.path == '/v1/payments/charge'
        assert transport.body() == {
            'order_id': 'O1',
            'amount': 105.0,
            'method': 'UPI',
            'idempotency_key': 'k1',
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_status_is_declined(self):
        transport = RecordingTransport(httpx.Response(200, json={'id': 'pay_2', 'status': 'FAILED'}))
        client = PaymentClientImpl(http=_http(transport))

        with pytest.raises(PaymentDeclinedError):
            await client.charge(
                order_id='O1', amount=Decimal('1'), method=PaymentMethod.CARD, idempotency_key='k1'
            )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_rejected_charge_is_declined(self):
        transport = RecordingTransport(httpx.Response(402, json={'detail': 'insufficient funds'}))
        client = PaymentClientImpl(http=_http(transport))

        with pytest.raises(PaymentDeclinedError):
            await client.charge(
                order_id='O1', amount=Decimal('1'), method=PaymentMethod.CARD, idempotency_key='k1'
            )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unreachable_gateway_is_unavailable_not_declined(self):
        transport = RecordingTransport(*[httpx.Response(503) for _ in range(2)])
        client = PaymentClientImpl(http=_http(transport, attempts=2))

        with pytest.raises(UpstreamUnavailableError):
            await client.charge(
                order_id='O1', amount=Decimal('1'), method=PaymentMethod.CARD, idempotency_key='k1'
            )

        assert len(transport.requests) == 2
        assert {r.headers['Idempotency-Key'] for r in transport.requests} == {'k1'}


class TestDirectoryClient:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exists(self):
        transport = RecordingTransport(httpx.Response(200, json={'id': 'U1'}))
        client = DirectoryClientImpl(http=_http(transport))

        assert await client.exists(entity_id='U1') is True
        assert transport.requests[0].url.path == '/U1'

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_404_means_missing(self):
        transport = RecordingTransport(httpx.Response(404, json={'detail': 'no such user'}))
        client = DirectoryClientImpl(http=_http(transport))

        assert await client.exists(entity_id='U404') is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_rejections_propagate(self):
        transport = RecordingTransport(httpx.Response(403, json={'detail': 'forbidden'}))
        client = DirectoryClientImpl(http=_http(transport))

        with pytest.raises(UpstreamResponseError):
            await client.exists(entity_id='U1')
