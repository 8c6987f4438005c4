from typing import Any, Optional


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    error_code = 'error'

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = context or {}
        super().__init__(message)

    def to_body(self) -> dict[str, Any]:
        return {'error': self.error_code, 'detail': self.message, **self.context}


class ValidationError(CustomBaseError):
    error_code = 'validation_error'

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, 400, context=context)


class NotFoundError(CustomBaseError):
    error_code = 'not_found'

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, 404, context=context)


class ConflictError(CustomBaseError):
    error_code = 'conflict'

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, 409, context=context)


class PaymentDeclinedError(CustomBaseError):
    error_code = 'payment_declined'

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, 402, context=context)


class UpstreamUnavailableError(CustomBaseError):
    error_code = 'upstream_unavailable'

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, 503, context=context)


class InternalError(CustomBaseError):
    error_code = 'internal_error'

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message, 500, context=context)


# Seat inventory


class SeatNotFoundError(NotFoundError):
    error_code = 'seat_not_found'


class SeatUnavailableError(ConflictError):
    error_code = 'seat_unavailable'


class HoldConflictError(ConflictError):
    error_code = 'hold_conflict'


class EventNotOnSaleError(ConflictError):
    error_code = 'event_not_on_sale'


# Order saga


class PricingFailedError(InternalError):
    error_code = 'pricing_failed'


class AllocationFailedError(InternalError):
    error_code = 'allocation_failed'


class OrderVersionConflictError(ConflictError):
    error_code = 'order_version_conflict'


class InvalidTransitionError(ConflictError):
    error_code = 'invalid_transition'


class UpstreamResponseError(CustomBaseError):
    """Non-retryable 4xx answer from a collaborator; carries the callee's status and body"""

    error_code = 'upstream_rejected'

    def __init__(self, message: str, status_code: int, *, body: Any = None) -> None:
        super().__init__(message, status_code)
        self.body = body
