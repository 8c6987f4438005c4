from typing import Optional

from fastapi import APIRouter, Depends, Header

from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.order.app.command.cancel_order_use_case import CancelOrderUseCase
from src.service.order.app.command.create_order_use_case import CreateOrderUseCase
from src.service.order.app.query.get_order_use_case import GetOrderUseCase
from src.service.order.driving_adapter.http_controller.schema.order_schema import (
    OrderCancelResponse,
    OrderCreateRequest,
    OrderResponse,
    OrderWithTicketsResponse,
)


router = APIRouter(prefix='/orders', tags=['order'])


@router.post('', status_code=200)
@Logger.io
async def create_order(
    request: OrderCreateRequest,
    idempotency_key: Optional[str] = Header(default=None, alias='Idempotency-Key'),
    use_case: CreateOrderUseCase = Depends(CreateOrderUseCase.depends),
) -> OrderWithTicketsResponse:
    if not idempotency_key:
        raise ValidationError('Idempotency-Key header is required')
    result = await use_case.create_order(
        user_id=request.user_id,
        event_id=request.event_id,
        seats=request.seats,
        payment_method=request.payment_method,
        idempotency_key=idempotency_key,
    )
    return OrderWithTicketsResponse.from_dto(result)


@router.get('/{order_id}')
@Logger.io
async def get_order(
    order_id: str,
    use_case: GetOrderUseCase = Depends(GetOrderUseCase.depends),
) -> OrderWithTicketsResponse:
    result = await use_case.get_order(order_id=order_id)
    return OrderWithTicketsResponse.from_dto(result)


@router.post('/{order_id}/cancel')
@Logger.io
async def cancel_order(
    order_id: str,
    use_case: CancelOrderUseCase = Depends(CancelOrderUseCase.depends),
) -> OrderCancelResponse:
    order = await use_case.cancel(order_id=order_id)
    return OrderCancelResponse(order=OrderResponse.from_entity(order))
