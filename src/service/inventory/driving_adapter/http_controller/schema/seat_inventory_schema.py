from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire format is camelCase; python attributes stay snake_case"""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True
    )


class ReserveRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'orderId': '01936d8f-5e73-7c4e-a9c5-123456789abc',
                'eventId': 'E1',
                'seats': ['A-1-1', 'A-1-2'],
                'userId': 'U1',
                'durationSeconds': 900,
            }
        }
    )

    order_id: str
    event_id: str
    seats: List[str] = Field(min_length=1)
    user_id: Optional[str] = None
    duration_seconds: Optional[int] = Field(default=None, gt=0)


class AllocateRequest(CamelModel):
    order_id: str
    event_id: str
    seats: List[str] = Field(min_length=1)
    hold_ids: Optional[List[str]] = None


class ReleaseRequest(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={'example': {'holdIds': ['01936d8f-5e73-7c4e-a9c5-123456789abc']}}
    )

    hold_ids: Optional[List[str]] = None
    seats: Optional[List[str]] = None
    event_id: Optional[str] = None
    order_id: Optional[str] = None


class SeatPricesRequest(CamelModel):
    event_id: str
    seats: List[str] = Field(min_length=1)


class SeatSnapshotResponse(CamelModel):
    seat_id: str
    section: str
    row: str
    seat_number: int
    price: float


class AllocateResponse(CamelModel):
    allocation_id: str
    allocated: List[SeatSnapshotResponse]


class ReleaseResponse(CamelModel):
    ok: bool = True
    released_holds: int
    released_seats: int


class SeatPricesResponse(CamelModel):
    prices: List[float]


class SeatResponse(CamelModel):
    seat_id: str
    section: str
    row: str
    seat_number: int
    price: float
    status: str


class SeatListResponse(CamelModel):
    seats: List[SeatResponse]


class HoldResponse(CamelModel):
    hold_id: str
    idempotency_key: Optional[str] = None
    order_id: str
    event_id: str
    seat_id: str
    user_id: Optional[str] = None
    created_at: datetime
    expires_at: datetime
    status: str


class HoldEnvelopeResponse(CamelModel):
    hold: HoldResponse
