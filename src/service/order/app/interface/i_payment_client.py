from abc import ABC, abstractmethod
from decimal import Decimal

from src.service.order.app.dto.payment_dto import PaymentResult
from src.service.order.domain.enum.order_status import PaymentMethod


class IPaymentClient(ABC):
    @abstractmethod
    async def charge(
        self, *, order_id: str, amount: Decimal, method: PaymentMethod, idempotency_key: str
    ) -> PaymentResult:
        """
        Raises:
            PaymentDeclinedError: the gateway refused the charge
            UpstreamUnavailableError: gateway unreachable after retries
        """
        pass

    @abstractmethod
    async def refund(self, *, payment_id: str) -> PaymentResult:
        pass
