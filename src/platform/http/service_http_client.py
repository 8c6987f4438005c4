from typing import Any, Optional

import httpx

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import UpstreamResponseError
from src.platform.http.retry_policy import RetryableResponseError, RetryPolicy


class ServiceHttpClient:
    """
    JSON-over-HTTP client for one collaborator, wrapped in the shared RetryPolicy.

    - 2xx: returns the decoded JSON body (or {} when empty)
    - retryable status / transport error: retried, then UpstreamUnavailableError
    - other 4xx: UpstreamResponseError carrying the callee's status and body
    """

    def __init__(
        self,
        *,
        name: str,
        base_url: str,
        retry_policy: Optional[RetryPolicy] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip('/')
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self._timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url, timeout=self._timeout, transport=self._transport
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request('GET', path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request('POST', path, **kwargs)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        async def attempt() -> httpx.Response:
            response = await self.client.request(
                method, path, json=json, params=params, headers=headers
            )
            if self.retry_policy.retryable_status(response.status_code):
                raise RetryableResponseError(response)
            return response

        response = await self.retry_policy.run(attempt, target=f'{self.name} {method} {path}')
        body = _decode(response)
        if response.is_success:
            return body if body is not None else {}

        detail = body.get('detail') or body.get('error') if isinstance(body, dict) else body
        raise UpstreamResponseError(
            f'{self.name} rejected {method} {path}: {detail or response.status_code}',
            response.status_code,
            body=body,
        )


def _decode(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return {'detail': response.text}
