from typing import Any

import attrs


@attrs.frozen
class StoredResponse:
    """HTTP outcome of a mutating call, replayed verbatim for a repeated idempotency key"""

    status_code: int
    body: dict[str, Any]
