from typing import Any, Optional

import attrs

from src.service.reconciliation.domain.enum.reconciliation_enum import (
    RecommendedAction,
    ResponseCodeType,
)
from src.service.reconciliation.domain.value_object.remote_status import (
    RemoteStatus,
    normalize_remote_status,
)
from src.service.shared_kernel.domain.entity.booking_entity import Booking


@attrs.define(frozen=True)
class RemoteSnapshot:
    """What the gateway said; `error` carries any failed call instead of raising"""

    order_id: str
    order: Optional[dict[str, Any]] = None
    transactions: list[dict[str, Any]] = attrs.field(factory=list)
    error: Optional[str] = None
    transactions_unavailable: bool = False


@attrs.define(frozen=True)
class ReconciliationSummary:
    remote_status: str
    status_code: Optional[str]
    code_type: ResponseCodeType
    code_description: str
    recommended_action: RecommendedAction
    discrepancy: bool
    inconclusive: bool = False


@attrs.define(frozen=True)
class ReconciliationResult:
    local: Optional[Booking]
    remote: RemoteSnapshot
    summary: ReconciliationSummary


def decide_action(*, booking: Optional[Booking], remote: RemoteStatus) -> RecommendedAction:
    """
    | remote  | local                               | action            |
    |---------|-------------------------------------|-------------------|
    | success | not (confirmed and paid)            | markPaidAndResend |
    | failed  | status pending or payment pending   | markFailed        |
    | other   | any, or no local booking            | none              |
    """
    if booking is None:
        return RecommendedAction.NONE
    if remote.is_success and not booking.is_confirmed_and_paid:
        return RecommendedAction.MARK_PAID_AND_RESEND
    if remote.is_failure and booking.is_pending:
        return RecommendedAction.MARK_FAILED
    return RecommendedAction.NONE


def summarize(*, booking: Optional[Booking], remote: RemoteSnapshot) -> ReconciliationSummary:
    status = normalize_remote_status(remote.transactions)
    if remote.transactions_unavailable:
        # The gateway could not be read; never infer success or failure from silence
        return ReconciliationSummary(
            remote_status=status.status,
            status_code=None,
            code_type=ResponseCodeType.UNKNOWN,
            code_description=remote.error or 'Gateway unavailable',
            recommended_action=RecommendedAction.NONE,
            discrepancy=False,
            inconclusive=True,
        )

    action = decide_action(booking=booking, remote=status)
    return ReconciliationSummary(
        remote_status=status.status,
        status_code=status.status_code,
        code_type=status.code_type,
        code_description=status.code_description,
        recommended_action=action,
        discrepancy=action != RecommendedAction.NONE,
    )
