from unittest.mock import AsyncMock

import httpx
import pytest

from src.platform.exception.exceptions import UpstreamUnavailableError
from src.platform.http.retry_policy import (
    RetryableResponseError,
    RetryPolicy,
    is_retryable_status,
)


class TestRetryableStatus:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        'status_code,expected',
        [(500, True), (503, True), (429, True), (400, False), (404, False), (409, False)],
    )
    def test_classification(self, status_code, expected):
        assert is_retryable_status(status_code) is expected


class TestRetryPolicy:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_first_success(self):
        attempt = AsyncMock(return_value='ok')

        result = await RetryPolicy(attempts=3, delay_seconds=0).run(attempt, target='t')

        assert result == 'ok'
        assert attempt.await_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_retries_transport_errors_then_succeeds(self):
        attempt = AsyncMock(side_effect=[httpx.ConnectError('refused'), 'ok'])

        result = await RetryPolicy(attempts=3, delay_seconds=0).run(attempt, target='t')

        assert result == 'ok'
        assert attempt.await_count == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exhaustion_raises_unavailable(self):
        response = httpx.Response(503)
        attempt = AsyncMock(side_effect=RetryableResponseError(response))

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await RetryPolicy(attempts=3, delay_seconds=0).run(attempt, target='payment POST')

        assert attempt.await_count == 3
        assert exc_info.value.status_code == 503
        assert exc_info.value.context == {'upstream': 'payment POST'}

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self):
        attempt = AsyncMock(side_effect=KeyError('boom'))

        with pytest.raises(KeyError):
            await RetryPolicy(attempts=3, delay_seconds=0).run(attempt, target='t')

        assert attempt.await_count == 1
