from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import DomainError, NotFoundError
from src.service.reconciliation.app.command.apply_reconciliation_use_case import (
    ApplyReconciliationUseCase,
)
from src.service.shared_kernel.domain.entity.booking_entity import Booking
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from test.service.test_helpers import TEST_BOOKING_ID, make_booking


PAID_AT = datetime(2026, 5, 2, 9, 15, tzinfo=timezone.utc)


class InMemoryReconciliationBookingRepo:
    def __init__(self, booking: Booking | None):
        self.booking = booking
        self.saves = 0

    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        return self.booking if self.booking and self.booking.id == booking_id else None

    async def save_payment_state(self, *, booking: Booking) -> Booking:
        booking.ensure_payment_consistent()
        self.saves += 1
        self.booking = booking
        return booking


def _pending() -> Booking:
    return make_booking(
        event_at=None,
        status=BookingStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        email_sent=True,
    )


@pytest.mark.unit
class TestApplyReconciliation:
    @pytest.mark.asyncio
    async def test_mark_paid_and_resend(self) -> None:
        """
        Given a pending booking that the gateway reports as paid
        When an admin applies markPaidAndResend with resend
        Then the booking is confirmed and paid and flagged for ticket re-delivery
        """
        # Arrange
        repo = InMemoryReconciliationBookingRepo(_pending())
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        # Act
        result = await use_case.execute(
            booking_id=TEST_BOOKING_ID, action='markPaidAndResend', resend=True
        )

        # Assert
        assert result.success is True
        assert result.message == 'Booking marked as paid'
        assert result.booking.status == BookingStatus.CONFIRMED
        assert result.booking.payment_status == PaymentStatus.PAID
        assert result.booking.payment_date is not None
        assert result.booking.email_sent is False

    @pytest.mark.asyncio
    async def test_drifted_paid_but_pending_booking_is_confirmed(self) -> None:
        """
        Given a stored booking that is paid but still pending
        When an admin applies markPaidAndResend
        Then it becomes confirmed and keeps its original payment date
        """
        # Arrange
        drifted = make_booking(
            event_at=None,
            status=BookingStatus.PENDING,
            payment_status=PaymentStatus.PAID,
            payment_date=PAID_AT,
        )
        repo = InMemoryReconciliationBookingRepo(drifted)
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        # Act
        result = await use_case.execute(booking_id=TEST_BOOKING_ID, action='markPaidAndResend')

        # Assert
        assert result.booking.status == BookingStatus.CONFIRMED
        assert result.booking.payment_date == PAID_AT
        assert repo.saves == 1

    @pytest.mark.asyncio
    async def test_applying_twice_is_idempotent(self) -> None:
        # Arrange
        repo = InMemoryReconciliationBookingRepo(_pending())
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        # Act
        first = await use_case.execute(booking_id=TEST_BOOKING_ID, action='markPaidAndResend')
        second = await use_case.execute(booking_id=TEST_BOOKING_ID, action='markPaidAndResend')

        # Assert
        assert second.booking == first.booking
        assert second.booking.payment_date == first.booking.payment_date

    @pytest.mark.asyncio
    async def test_existing_payment_date_is_kept(self) -> None:
        booking = make_booking(event_at=None, payment_date=PAID_AT)
        repo = InMemoryReconciliationBookingRepo(booking)
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        result = await use_case.execute(booking_id=TEST_BOOKING_ID, action='markPaidAndResend')

        assert result.booking.payment_date == PAID_AT

    @pytest.mark.asyncio
    async def test_mark_failed(self) -> None:
        repo = InMemoryReconciliationBookingRepo(_pending())
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        result = await use_case.execute(booking_id=TEST_BOOKING_ID, action='markFailed')

        assert result.message == 'Booking marked as failed'
        assert result.booking.status == BookingStatus.CANCELLED
        assert result.booking.payment_status == PaymentStatus.FAILED

    @pytest.mark.asyncio
    @pytest.mark.parametrize('action', ['none', 'refund', ''])
    async def test_unknown_action_writes_nothing(self, action: str) -> None:
        repo = InMemoryReconciliationBookingRepo(_pending())
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        with pytest.raises(DomainError, match='Unknown action'):
            await use_case.execute(booking_id=TEST_BOOKING_ID, action=action)
        assert repo.saves == 0

    @pytest.mark.asyncio
    async def test_unknown_booking(self) -> None:
        repo = AsyncMock()
        repo.get_by_id = AsyncMock(return_value=None)
        use_case = ApplyReconciliationUseCase(booking_repo=repo)

        with pytest.raises(NotFoundError):
            await use_case.execute(booking_id='bk_missing', action='markFailed')
        repo.save_payment_state.assert_not_awaited()
