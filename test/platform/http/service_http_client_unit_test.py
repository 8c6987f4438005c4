import httpx
import pytest

from src.platform.exception.exceptions import UpstreamResponseError, UpstreamUnavailableError
from src.platform.http.retry_policy import RetryPolicy
from src.platform.http.service_http_client import ServiceHttpClient


def _client(handler, *, attempts: int = 3) -> ServiceHttpClient:
    return ServiceHttpClient(
        name='inventory',
        base_url='http://inventory/',
        retry_policy=RetryPolicy(attempts=attempts, delay_seconds=0),
        transport=httpx.MockTransport(handler),
    )


class TestServiceHttpClient:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success_returns_json(self):
        client = _client(lambda request: httpx.Response(200, json={'ok': True}))

        assert await client.post('/reserve', json={'seats': ['A-1-1']}) == {'ok': True}
        await client.aclose()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_success_body_is_empty_dict(self):
        client = _client(lambda request: httpx.Response(204))

        assert await client.post('/release') == {}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_5xx_is_retried_then_succeeds(self):
        responses = iter([httpx.Response(503), httpx.Response(200, json={'prices': [1.0]})])
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return next(responses)

        client = _client(handler)

        assert await client.post('/seat-prices') == {'prices': [1.0]}
        assert len(seen) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_persistent_5xx_is_unavailable(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(500, json={'detail': 'down'})

        client = _client(handler, attempts=2)

        with pytest.raises(UpstreamUnavailableError):
            await client.post('/allocate')
        assert len(seen) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_transport_error_is_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('refused', request=request)

        client = _client(handler, attempts=2)

        with pytest.raises(UpstreamUnavailableError):
            await client.get('/seats')

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_4xx_is_not_retried_and_keeps_body(self):
        seen = []
        body = {'error': 'seat_unavailable', 'detail': 'Seat not available'}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(409, json=body)

        client = _client(handler)

        with pytest.raises(UpstreamResponseError) as exc_info:
            await client.post('/reserve')

        assert len(seen) == 1
        assert exc_info.value.status_code == 409
        assert exc_info.value.body == body
        assert 'Seat not available' in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        client = _client(lambda request: httpx.Response(400, text='bad input'))

        with pytest.raises(UpstreamResponseError) as exc_info:
            await client.post('/reserve')

        assert exc_info.value.body == {'detail': 'bad input'}
