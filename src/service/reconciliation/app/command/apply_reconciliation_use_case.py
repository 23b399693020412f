from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.admission_metrics import admission_metrics
from src.service.reconciliation.app.dto.apply_reconciliation_result import (
    ApplyReconciliationResult,
)
from src.service.reconciliation.app.interface.i_reconciliation_booking_repo import (
    IReconciliationBookingRepo,
)
from src.service.reconciliation.domain.enum.reconciliation_enum import RecommendedAction


class ApplyReconciliationUseCase:
    """
    Apply an operator-confirmed corrective action to one booking.

    Both actions set a target state rather than a delta, so applying the same
    action twice leaves the booking unchanged. Ticket re-delivery is only
    requested when `resend` is set; this use case never sends email itself.
    """

    def __init__(self, *, booking_repo: IReconciliationBookingRepo) -> None:
        self.booking_repo = booking_repo

    @classmethod
    @inject
    def depends(
        cls,
        booking_repo: IReconciliationBookingRepo = Depends(
            Provide[Container.reconciliation_booking_repo]
        ),
    ) -> Self:
        return cls(booking_repo=booking_repo)

    @Logger.io
    async def execute(
        self, *, booking_id: str, action: str, resend: bool = False
    ) -> ApplyReconciliationResult:
        if action not in (RecommendedAction.MARK_PAID_AND_RESEND, RecommendedAction.MARK_FAILED):
            raise DomainError('Unknown action')

        booking = await self.booking_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')

        if action == RecommendedAction.MARK_PAID_AND_RESEND:
            updated = booking.mark_as_paid(resend=resend)
            message = 'Booking marked as paid'
        else:
            updated = booking.mark_as_payment_failed()
            message = 'Booking marked as failed'

        saved = await self.booking_repo.save_payment_state(booking=updated)
        admission_metrics.reconciliations_applied.labels(action=action).inc()
        Logger.base.info(
            f'🔁 [RECONCILE-APPLIED] {action} on booking {booking_id}: '
            f'{booking.status}/{booking.payment_status} -> {saved.status}/{saved.payment_status}'
            f'{" (ticket resend requested)" if resend else ""}'
        )
        return ApplyReconciliationResult(success=True, message=message, booking=saved)
