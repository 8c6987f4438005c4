from typing import Optional

import attrs


@attrs.frozen
class PaymentResult:
    payment_id: Optional[str]
    status: str
