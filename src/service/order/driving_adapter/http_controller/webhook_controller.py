from fastapi import APIRouter, Depends

from src.platform.logging.loguru_io import Logger
from src.service.order.app.command.handle_payment_callback_use_case import (
    HandlePaymentCallbackUseCase,
)
from src.service.order.app.command.handle_reservation_callback_use_case import (
    HandleReservationCallbackUseCase,
)
from src.service.order.driving_adapter.http_controller.schema.order_schema import (
    PaymentWebhookRequest,
    ReservationWebhookRequest,
    WebhookAckResponse,
)


router = APIRouter(prefix='/webhooks', tags=['webhook'])


@router.post('/payment')
@Logger.io
async def payment_webhook(
    request: PaymentWebhookRequest,
    use_case: HandlePaymentCallbackUseCase = Depends(HandlePaymentCallbackUseCase.depends),
) -> WebhookAckResponse:
    """Always 200 once the payload is valid; processing failures are logged, not returned."""
    await use_case.handle(
        order_id=request.order_id, status=request.status, payment_id=request.payment_id
    )
    return WebhookAckResponse()


@router.post('/reservation')
@Logger.io
async def reservation_webhook(
    request: ReservationWebhookRequest,
    use_case: HandleReservationCallbackUseCase = Depends(HandleReservationCallbackUseCase.depends),
) -> WebhookAckResponse:
    await use_case.handle(order_id=request.order_id, action=request.action)
    return WebhookAckResponse()
