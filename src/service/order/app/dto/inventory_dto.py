from typing import List

import attrs


@attrs.frozen
class Reservation:
    hold_ids: List[str]
    expires_at: str
