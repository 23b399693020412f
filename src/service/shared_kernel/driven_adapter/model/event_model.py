from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class EventModel(Base):
    __tablename__ = 'event'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    time: Mapped[str] = mapped_column(String(32), default='', nullable=False)
    venue: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    location: Mapped[str] = mapped_column(String(255), default='', nullable=False)
