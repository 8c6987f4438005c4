from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class TicketModel(Base):
    __tablename__ = 'tickets'
    __table_args__ = (UniqueConstraint('order_id', 'seat', name='uq_tickets_order_seat'),)

    ticket_id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    order_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False)
    seat: Mapped[str] = mapped_column(String(64), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
