"""
Fixed-delay retry policy shared by every outbound client.

Retries reuse the exact same request (including any Idempotency-Key header),
so mutating calls rely on the callee's idempotency cache to stay safe.
"""

from typing import Awaitable, Callable, TypeVar

import anyio
import attrs
import httpx

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import UpstreamUnavailableError
from src.platform.logging.loguru_io import Logger


_T = TypeVar('_T')


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code == 429


class RetryableResponseError(Exception):
    """Raised inside an attempt when the response status should be retried"""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(f'HTTP {response.status_code}')


@attrs.frozen
class RetryPolicy:
    attempts: int = 3
    delay_seconds: float = 0.5
    retryable_status: Callable[[int], bool] = is_retryable_status

    @classmethod
    def from_settings(cls) -> 'RetryPolicy':
        return cls(
            attempts=settings.HTTP_RETRY_ATTEMPTS,
            delay_seconds=settings.HTTP_RETRY_DELAY_SECONDS,
        )

    async def run(self, attempt: Callable[[], Awaitable[_T]], *, target: str) -> _T:
        """
        Run `attempt` up to `attempts` times with a fixed delay in between.

        Transport errors and RetryableResponseError are retried; anything else
        propagates immediately. Exhaustion raises UpstreamUnavailableError.
        """
        last_error: Exception | None = None
        for attempt_no in range(1, self.attempts + 1):
            try:
                return await attempt()
            except (httpx.TransportError, RetryableResponseError) as e:
                last_error = e
                if attempt_no < self.attempts:
                    Logger.base.warning(
                        f'🔁 [RETRY] {target} failed (attempt {attempt_no}/{self.attempts}): {e}'
                    )
                    await anyio.sleep(self.delay_seconds)

        Logger.base.error(f'❌ [RETRY] {target} failed after {self.attempts} attempts: {last_error}')
        raise UpstreamUnavailableError(f'{target} unavailable', upstream=target)
