from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'AVAILABLE'
    HELD = 'HELD'
    ALLOCATED = 'ALLOCATED'


class HoldStatus(StrEnum):
    HELD = 'HELD'
    ALLOCATED = 'ALLOCATED'
    RELEASED = 'RELEASED'
