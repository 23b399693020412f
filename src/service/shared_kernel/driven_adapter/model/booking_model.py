from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


if TYPE_CHECKING:
    from src.service.shared_kernel.driven_adapter.model.event_model import EventModel


class BookingModel(Base):
    __tablename__ = 'booking'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    booking_reference: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_id: Mapped[str] = mapped_column(
        String(64), ForeignKey('event.id'), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False, index=True)
    payment_status: Mapped[str] = mapped_column(String(20), default='pending', nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), default='raiffeisen', nullable=False)
    gateway_order_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True, index=True)
    gateway_transaction_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    currency: Mapped[str] = mapped_column(String(3), default='EUR', nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    customer_email: Mapped[str] = mapped_column(String(255), default='', nullable=False)
    email_sent: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    event: Mapped['EventModel'] = relationship('EventModel', lazy='selectin', viewonly=True)
    tickets: Mapped[List['BookingTicketModel']] = relationship(
        'BookingTicketModel',
        order_by='BookingTicketModel.position',
        lazy='selectin',
        cascade='all, delete-orphan',
    )


class BookingTicketModel(Base):
    __tablename__ = 'booking_ticket'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[str] = mapped_column(
        String(64), ForeignKey('booking.id', ondelete='CASCADE'), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ticket_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    ticket_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    qr_code: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    is_used: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    used_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    validated_by: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
