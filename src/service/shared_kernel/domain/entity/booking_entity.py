from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.shared_kernel.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from src.service.shared_kernel.domain.value_object.event_snapshot import EventSnapshot


@attrs.define
class BookingTicket:
    ticket_id: str
    ticket_name: str
    price: Decimal = Decimal('0')
    qr_code: Optional[str] = None
    is_used: bool = False
    used_at: Optional[datetime] = None
    validated_by: Optional[str] = None

    def mark_used(self, *, validated_by: str, used_at: datetime) -> 'BookingTicket':
        """
        Admit this ticket; raises if it was already admitted.

        The database repo applies the same write-once rule as a conditional
        UPDATE; this is the in-process form used by in-memory repositories.
        """
        if self.is_used:
            raise DomainError(f'Ticket {self.ticket_id} already validated')
        return attrs.evolve(self, is_used=True, used_at=used_at, validated_by=validated_by)


@attrs.define
class Booking:
    id: str
    user_id: str
    event: EventSnapshot
    tickets: List[BookingTicket] = attrs.field(factory=list)
    booking_reference: str = ''
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.RAIFFEISEN
    gateway_order_id: Optional[str] = None
    gateway_transaction_id: Optional[str] = None
    total_amount: Decimal = Decimal('0')
    currency: str = 'EUR'
    customer_name: str = ''
    customer_email: str = ''
    email_sent: bool = False
    payment_date: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def ensure_payment_consistent(self) -> None:
        """
        Paid bookings must be confirmed.

        Checked before a payment state is written, not when a row is loaded:
        stored rows written by other paths may have drifted, and reconciliation
        has to be able to read them.
        """
        if self.payment_status == PaymentStatus.PAID and self.status != BookingStatus.CONFIRMED:
            raise DomainError(
                f'Booking {self.id}: payment status paid requires status confirmed '
                f'(got {self.status})'
            )

    @property
    def event_id(self) -> str:
        return self.event.id

    @property
    def is_confirmed_and_paid(self) -> bool:
        return self.status == BookingStatus.CONFIRMED and self.payment_status == PaymentStatus.PAID

    @property
    def is_pending(self) -> bool:
        return self.status == BookingStatus.PENDING or self.payment_status == PaymentStatus.PENDING

    def find_ticket(self, ticket_id: str) -> Optional[BookingTicket]:
        return next((t for t in self.tickets if t.ticket_id == ticket_id), None)

    def find_ticket_by_code(self, code: str) -> Optional[BookingTicket]:
        return next((t for t in self.tickets if code in (t.ticket_id, t.qr_code)), None)

    @Logger.io
    def mark_as_paid(self, *, resend: bool = False) -> 'Booking':
        """
        Move to (confirmed, paid).

        Re-applying to an already paid booking yields the same state: the
        payment and confirmation timestamps are only filled when absent.
        """
        now = datetime.now(timezone.utc)
        return attrs.evolve(
            self,
            status=BookingStatus.CONFIRMED,
            payment_status=PaymentStatus.PAID,
            payment_date=self.payment_date or now,
            confirmed_at=self.confirmed_at or now,
            email_sent=False if resend else self.email_sent,
        )

    @Logger.io
    def mark_as_payment_failed(self) -> 'Booking':
        return attrs.evolve(
            self,
            status=BookingStatus.CANCELLED,
            payment_status=PaymentStatus.FAILED,
        )
