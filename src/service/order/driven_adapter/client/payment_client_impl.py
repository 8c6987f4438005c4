from decimal import Decimal

from src.platform.exception.exceptions import PaymentDeclinedError, UpstreamResponseError
from src.platform.http.service_http_client import ServiceHttpClient
from src.platform.logging.loguru_io import Logger
from src.service.order.app.dto.payment_dto import PaymentResult
from src.service.order.app.interface.i_payment_client import IPaymentClient
from src.service.order.domain.enum.order_status import PaymentMethod


DECLINED_STATUSES = frozenset({'FAILED', 'DECLINED'})


class PaymentClientImpl(IPaymentClient):
    """
    Payment gateway adapter.

    POST /v1/payments/charge  {order_id, amount, method, idempotency_key} -> {payment_id, status}
    POST /v1/payments/refund  {payment_id}
    """

    def __init__(self, *, http: ServiceHttpClient) -> None:
        self.http = http

    @Logger.io
    async def charge(
        self, *, order_id: str, amount: Decimal, method: PaymentMethod, idempotency_key: str
    ) -> PaymentResult:
        try:
            data = await self.http.post(
                '/v1/payments/charge',
                json={
                    'order_id': order_id,
                    'amount': float(amount),
                    'method': method.value,
                    'idempotency_key': idempotency_key,
                },
                headers={'Idempotency-Key': idempotency_key},
            )
        except UpstreamResponseError as e:
            raise PaymentDeclinedError(e.message, order_id=order_id) from e

        result = PaymentResult(
            payment_id=data.get('payment_id') or data.get('id'),
            status=str(data.get('status') or '').upper(),
        )
        if result.status in DECLINED_STATUSES:
            raise PaymentDeclinedError(
                f'Payment {result.status.lower()} for order {order_id}', order_id=order_id
            )
        return result

    @Logger.io
    async def refund(self, *, payment_id: str) -> PaymentResult:
        data = await self.http.post('/v1/payments/refund', json={'payment_id': payment_id})
        return PaymentResult(
            payment_id=data.get('payment_id') or payment_id,
            status=str(data.get('status') or 'REFUNDED').upper(),
        )
