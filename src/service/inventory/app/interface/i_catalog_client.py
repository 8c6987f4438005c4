from abc import ABC, abstractmethod
from typing import Optional


class ICatalogClient(ABC):
    @abstractmethod
    async def get_event_status(self, *, event_id: str) -> Optional[str]:
        """
        Returns:
            The catalog's status string (e.g. 'ON_SALE'), or None when the event is unknown

        Raises:
            UpstreamUnavailableError: catalog unreachable after retries
        """
        pass
