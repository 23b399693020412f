from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class ValidationLogModel(Base):
    """Insert-only audit trail of admission attempts"""

    __tablename__ = 'validation_log'

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    validator_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    validator_name: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    booking_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    ticket_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_title: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), default='', nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    validation_type: Mapped[str] = mapped_column(String(10), default='entry', nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    notes: Mapped[str] = mapped_column(String(1000), default='', nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    device_info: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    scan_metadata: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
