from decimal import Decimal
from typing import Any, List, Optional

from src.platform.http.service_http_client import ServiceHttpClient
from src.platform.logging.loguru_io import Logger
from src.service.order.app.dto.inventory_dto import Reservation
from src.service.order.app.interface.i_inventory_client import IInventoryClient


class InventoryClientImpl(IInventoryClient):
    def __init__(self, *, http: ServiceHttpClient) -> None:
        self.http = http

    @Logger.io
    async def reserve(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        duration_seconds: int,
        idempotency_key: str,
        user_id: Optional[str] = None,
    ) -> Reservation:
        body: dict[str, Any] = {
            'orderId': order_id,
            'eventId': event_id,
            'seats': seats,
            'durationSeconds': duration_seconds,
        }
        if user_id is not None:
            body['userId'] = user_id
        data = await self.http.post(
            '/reserve', json=body, headers={'Idempotency-Key': idempotency_key}
        )
        return Reservation(
            hold_ids=list(data.get('holdIds') or []), expires_at=data.get('expiresAt', '')
        )

    @Logger.io
    async def quote_prices(self, *, event_id: str, seats: List[str]) -> List[Decimal]:
        data = await self.http.post('/seat-prices', json={'eventId': event_id, 'seats': seats})
        return [Decimal(str(price)) for price in data.get('prices') or []]

    @Logger.io
    async def allocate(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        hold_ids: Optional[List[str]] = None,
    ) -> None:
        body: dict[str, Any] = {'orderId': order_id, 'eventId': event_id, 'seats': seats}
        if hold_ids:
            body['holdIds'] = hold_ids
        await self.http.post('/allocate', json=body)

    @Logger.io
    async def release(
        self,
        *,
        order_id: str,
        event_id: str,
        seats: List[str],
        hold_ids: Optional[List[str]] = None,
    ) -> None:
        # Hold ids target exactly this order's holds; seats are the fallback
        body: dict[str, Any] = (
            {'holdIds': hold_ids, 'orderId': order_id}
            if hold_ids
            else {'seats': seats, 'eventId': event_id, 'orderId': order_id}
        )
        await self.http.post('/release', json=body)
