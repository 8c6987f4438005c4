from abc import ABC, abstractmethod


class IDirectoryClient(ABC):
    """Existence check against the user or catalog directory"""

    @abstractmethod
    async def exists(self, *, entity_id: str) -> bool:
        pass
