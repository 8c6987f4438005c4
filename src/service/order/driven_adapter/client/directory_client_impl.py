from src.platform.exception.exceptions import UpstreamResponseError
from src.platform.http.service_http_client import ServiceHttpClient
from src.platform.logging.loguru_io import Logger
from src.service.order.app.interface.i_directory_client import IDirectoryClient


class DirectoryClientImpl(IDirectoryClient):
    """GET {base_url}/{id}; used for both the user and the catalog directory"""

    def __init__(self, *, http: ServiceHttpClient) -> None:
        self.http = http

    @Logger.io
    async def exists(self, *, entity_id: str) -> bool:
        try:
            await self.http.get(f'/{entity_id}')
        except UpstreamResponseError as e:
            if e.status_code == 404:
                return False
            raise
        return True
