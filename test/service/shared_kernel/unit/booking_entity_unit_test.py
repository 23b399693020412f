from datetime import datetime, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from test.service.test_helpers import TEST_TICKET_ID, make_booking


PAID_AT = datetime(2026, 5, 2, 9, 15, tzinfo=timezone.utc)


@pytest.mark.unit
class TestBookingPaymentTransitions:
    def test_drifted_state_loads_but_is_not_writable(self) -> None:
        drifted = make_booking(
            event_at=None, status=BookingStatus.PENDING, payment_status=PaymentStatus.PAID
        )

        assert drifted.is_confirmed_and_paid is False
        with pytest.raises(DomainError, match='requires status confirmed'):
            drifted.ensure_payment_consistent()

    def test_transitions_are_consistent(self) -> None:
        drifted = make_booking(
            event_at=None, status=BookingStatus.PENDING, payment_status=PaymentStatus.PAID
        )

        drifted.mark_as_paid().ensure_payment_consistent()
        drifted.mark_as_payment_failed().ensure_payment_consistent()

    def test_mark_as_paid_from_pending(self) -> None:
        booking = make_booking(
            event_at=None, status=BookingStatus.PENDING, payment_status=PaymentStatus.PENDING
        )

        paid = booking.mark_as_paid(resend=True)

        assert paid.status == BookingStatus.CONFIRMED
        assert paid.payment_status == PaymentStatus.PAID
        assert paid.payment_date is not None
        assert paid.confirmed_at is not None
        assert paid.email_sent is False

    def test_mark_as_paid_preserves_existing_payment_date(self) -> None:
        booking = make_booking(event_at=None, payment_date=PAID_AT)

        again = booking.mark_as_paid()

        assert again.payment_date == PAID_AT
        assert again.email_sent is True

    def test_mark_as_paid_twice_yields_same_state(self) -> None:
        booking = make_booking(
            event_at=None, status=BookingStatus.PENDING, payment_status=PaymentStatus.PENDING
        )

        once = booking.mark_as_paid()
        twice = once.mark_as_paid()

        assert twice == once

    def test_mark_as_payment_failed(self) -> None:
        booking = make_booking(
            event_at=None, status=BookingStatus.PENDING, payment_status=PaymentStatus.PENDING
        )

        failed = booking.mark_as_payment_failed()

        assert failed.status == BookingStatus.CANCELLED
        assert failed.payment_status == PaymentStatus.FAILED


@pytest.mark.unit
class TestBookingTicketLookup:
    def test_find_ticket_by_id_or_qr_code(self) -> None:
        booking = make_booking(event_at=None)

        assert booking.find_ticket(TEST_TICKET_ID) is not None
        assert booking.find_ticket_by_code('QR-8F2A') is not None
        assert booking.find_ticket_by_code(TEST_TICKET_ID) is not None
        assert booking.find_ticket_by_code('QR-NOPE') is None

    def test_mark_used_twice_raises(self) -> None:
        ticket = make_booking(event_at=None).tickets[0]
        used = ticket.mark_used(validated_by='val_3', used_at=PAID_AT)

        with pytest.raises(DomainError):
            used.mark_used(validated_by='val_3', used_at=PAID_AT)
