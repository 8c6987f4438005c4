from typing import Optional

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import UpstreamResponseError
from src.platform.http.service_http_client import ServiceHttpClient
from src.platform.logging.loguru_io import Logger
from src.service.inventory.app.interface.i_catalog_client import ICatalogClient


class CatalogClientImpl(ICatalogClient):
    """GET {INVENTORY_CATALOG_URL}/{eventId} -> {status, ...}"""

    def __init__(self, *, http: ServiceHttpClient) -> None:
        self.http = http

    @Logger.io
    async def get_event_status(self, *, event_id: str) -> Optional[str]:
        try:
            event = await self.http.get(f'/{event_id}')
        except UpstreamResponseError as e:
            if e.status_code == 404:
                return None
            raise
        return event.get('status') if isinstance(event, dict) else None


def build_inventory_catalog_client() -> Optional[CatalogClientImpl]:
    """The on-sale check is only enabled when INVENTORY_CATALOG_URL is set"""
    if not settings.INVENTORY_CATALOG_URL:
        return None
    return CatalogClientImpl(
        http=ServiceHttpClient(name='catalog', base_url=settings.INVENTORY_CATALOG_URL)
    )
