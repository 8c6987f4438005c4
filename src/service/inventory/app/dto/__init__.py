from src.service.inventory.app.dto.stored_response import StoredResponse


__all__ = ['StoredResponse']
