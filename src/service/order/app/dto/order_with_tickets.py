from typing import List

import attrs

from src.service.order.domain.entity.order_entity import Order
from src.service.order.domain.entity.ticket_entity import Ticket


@attrs.frozen
class OrderWithTickets:
    order: Order
    tickets: List[Ticket]
