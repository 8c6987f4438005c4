from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class SeatHoldModel(Base):
    __tablename__ = 'seat_holds'
    __table_args__ = (
        Index('ix_seat_holds_seat_status', 'seat_id', 'status'),
        Index('ix_seat_holds_status_expires_at', 'status', 'expires_at'),
    )

    hold_id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    idempotency_key: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    order_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False)
    seat_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default='HELD')
