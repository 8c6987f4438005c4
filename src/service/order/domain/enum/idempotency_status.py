from enum import StrEnum


class IdempotencyStatus(StrEnum):
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
