"""
Test helpers for unit tests

Builders for domain objects plus in-memory repository fakes. The fakes keep
the conditional-write contract of the real adapters: `mark_ticket_used` and
`mark_validated` return None when the ticket was admitted first by someone else.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from unittest.mock import AsyncMock

import attrs

from src.service.admission.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.admission.domain.entity.gift_ticket_entity import GiftTicket
from src.service.admission.domain.entity.validation_log_entry import ValidationLogEntry
from src.service.admission.domain.enum.validation_enum import GiftTicketStatus
from src.service.admission.domain.value_object.validation_policy import ValidationPolicy
from src.service.shared_kernel.domain.entity.booking_entity import Booking, BookingTicket
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.shared_kernel.domain.value_object.event_snapshot import EventSnapshot


TEST_EVENT_ID = 'evt_42'
TEST_USER_ID = 'user_7'
TEST_BOOKING_ID = 'bk_01'
TEST_TICKET_ID = 'TKT-8F2A'
TEST_GIFT_ID = 'GFT-1A2B3C4D'


def make_booking(
    *,
    event_at: Optional[datetime],
    booking_id: str = TEST_BOOKING_ID,
    user_id: str = TEST_USER_ID,
    event_id: str = TEST_EVENT_ID,
    status: BookingStatus = BookingStatus.CONFIRMED,
    payment_status: PaymentStatus = PaymentStatus.PAID,
    tickets: Optional[List[BookingTicket]] = None,
    gateway_order_id: Optional[str] = 'ord_77',
    payment_date: Optional[datetime] = None,
    customer_name: str = 'Ana Horvat',
    email_sent: bool = True,
) -> Booking:
    return Booking(
        id=booking_id,
        user_id=user_id,
        event=EventSnapshot(id=event_id, title='Summer Gala', date=event_at, venue='Arena'),
        tickets=tickets
        if tickets is not None
        else [BookingTicket(ticket_id=TEST_TICKET_ID, ticket_name='General Admission',
                            price=Decimal('25.00'), qr_code='QR-8F2A')],
        booking_reference='REF-1001',
        status=status,
        payment_status=payment_status,
        gateway_order_id=gateway_order_id,
        total_amount=Decimal('25.00'),
        customer_name=customer_name,
        customer_email='ana@example.com',
        email_sent=email_sent,
        payment_date=payment_date,
        created_at=datetime(2026, 5, 1, 10, 0, tzinfo=timezone.utc),
    )


def make_gift(
    *,
    event_at: Optional[datetime],
    status: GiftTicketStatus = GiftTicketStatus.SENT,
    is_validated: bool = False,
) -> GiftTicket:
    return GiftTicket(
        ticket_id=TEST_GIFT_ID,
        recipient_email='guest@example.com',
        status=status,
        customer_name='Guest',
        ticket_type='VIP',
        event_title='Summer Gala',
        event_date=event_at,
        is_validated=is_validated,
    )


def qr_payload(
    *,
    ticket_id: str = TEST_TICKET_ID,
    event_id: str = TEST_EVENT_ID,
    user_id: str = TEST_USER_ID,
    booking_id: Optional[str] = None,
) -> str:
    booking_part = f',"bookingId":"{booking_id}"' if booking_id else ''
    return (
        f'{{"ticketId":"{ticket_id}","eventId":"{event_id}","userId":"{user_id}"{booking_part}}}'
    )


class InMemoryBookingTicketRepo:
    """
    Booking store with a conditional admission write.

    `preempt_by` simulates a concurrent scan that wins the race: the next
    `mark_ticket_used` admits the ticket for that validator and reports a loss.
    """

    def __init__(self, bookings: List[Booking], *, preempt_by: Optional[str] = None):
        self.bookings = {b.id: b for b in bookings}
        self.preempt_by = preempt_by
        self.admissions = 0

    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        return self.bookings.get(booking_id)

    async def find_by_event_owner_ticket(
        self, *, event_id: str, user_id: str, ticket_id: str
    ) -> Booking | None:
        for booking in self.bookings.values():
            if (
                booking.event_id == event_id
                and booking.user_id == user_id
                and booking.find_ticket(ticket_id)
            ):
                return booking
        return None

    async def find_by_ticket_code(self, *, code: str) -> Booking | None:
        return next((b for b in self.bookings.values() if b.find_ticket_by_code(code)), None)

    def _admit(self, booking_id: str, ticket_id: str, by: str, at: datetime) -> Booking:
        booking = self.bookings[booking_id]
        tickets = [
            t.mark_used(validated_by=by, used_at=at) if t.ticket_id == ticket_id else t
            for t in booking.tickets
        ]
        self.bookings[booking_id] = attrs.evolve(booking, tickets=tickets)
        return self.bookings[booking_id]

    async def mark_ticket_used(
        self, *, booking_id: str, ticket_id: str, validated_by: str, used_at: datetime
    ) -> Booking | None:
        if self.preempt_by:
            self._admit(booking_id, ticket_id, self.preempt_by, used_at)
            self.preempt_by = None
            return None
        ticket = self.bookings[booking_id].find_ticket(ticket_id)
        if ticket is None or ticket.is_used:
            return None
        self.admissions += 1
        return self._admit(booking_id, ticket_id, validated_by, used_at)


class InMemoryGiftTicketRepo:
    def __init__(self, gifts: List[GiftTicket], *, preempt_by: Optional[str] = None):
        self.gifts = {g.ticket_id: g for g in gifts}
        self.preempt_by = preempt_by
        self.admissions = 0

    async def get_by_ticket_id(self, *, ticket_id: str) -> GiftTicket | None:
        return self.gifts.get(ticket_id)

    async def mark_validated(
        self, *, ticket_id: str, validated_by: str, validated_at: datetime
    ) -> GiftTicket | None:
        gift = self.gifts[ticket_id]
        if self.preempt_by:
            self.gifts[ticket_id] = gift.mark_validated(
                validated_by=self.preempt_by, validated_at=validated_at
            )
            self.preempt_by = None
            return None
        if gift.is_validated:
            return None
        self.admissions += 1
        self.gifts[ticket_id] = gift.mark_validated(
            validated_by=validated_by, validated_at=validated_at
        )
        return self.gifts[ticket_id]


class InMemoryValidationLog:
    def __init__(self) -> None:
        self.entries: List[ValidationLogEntry] = []

    async def append(self, *, entry: ValidationLogEntry) -> None:
        self.entries.append(entry)


class RepositoryMocks:
    """
    Container for the admission use case dependencies

    Example:
        ```python
        mocks = RepositoryMocks(bookings=[booking])
        use_case = mocks.validate_ticket_use_case()
        result = await use_case.execute(qr_code_data=..., caller=validator)
        assert mocks.validation_log.entries[-1].status == ValidationLogStatus.VALIDATED
        ```
    """

    def __init__(
        self,
        *,
        bookings: Optional[List[Booking]] = None,
        gifts: Optional[List[GiftTicket]] = None,
        policy: Optional[ValidationPolicy] = None,
        preempt_by: Optional[str] = None,
    ):
        self.booking_ticket_repo = InMemoryBookingTicketRepo(
            bookings or [], preempt_by=preempt_by
        )
        self.gift_ticket_repo = InMemoryGiftTicketRepo(gifts or [], preempt_by=preempt_by)
        self.validation_log = InMemoryValidationLog()
        self.policy_provider = AsyncMock()
        self.policy_provider.get_validation_policy = AsyncMock(
            return_value=policy or ValidationPolicy()
        )

    def validate_ticket_use_case(self, *, calendar_tz: str = 'UTC') -> ValidateTicketUseCase:
        return ValidateTicketUseCase(
            booking_ticket_repo=self.booking_ticket_repo,
            gift_ticket_repo=self.gift_ticket_repo,
            validation_log_repo=self.validation_log,
            policy_provider=self.policy_provider,
            calendar_tz=calendar_tz,
        )
