from typing import Optional

from fastapi import APIRouter, Depends, Query
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.reconciliation.app.command.apply_reconciliation_use_case import (
    ApplyReconciliationUseCase,
)
from src.service.reconciliation.app.query.reconcile_payment_use_case import (
    ReconcilePaymentUseCase,
)
from src.service.reconciliation.domain.value_object.reconciliation_result import (
    ReconciliationResult,
)
from src.service.reconciliation.driving_adapter.http_controller.schema.reconciliation_schema import (
    ApplyReconciliationRequest,
    ApplyReconciliationResponse,
    LocalBookingResponse,
    ReconciliationBatchResponse,
    ReconciliationResponse,
    ReconciliationSummaryResponse,
    RemoteSnapshotResponse,
)
from src.service.shared_kernel.domain.entity.booking_entity import Booking
from src.service.shared_kernel.domain.value_object.caller import Caller
from src.service.shared_kernel.driving_adapter.http_controller.auth.caller_auth import (
    require_admin,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


def _booking_response(booking: Booking) -> LocalBookingResponse:
    return LocalBookingResponse(
        id=booking.id,
        booking_reference=booking.booking_reference,
        user_id=booking.user_id,
        event_id=booking.event_id,
        status=booking.status,
        payment_status=booking.payment_status,
        payment_method=booking.payment_method,
        gateway_order_id=booking.gateway_order_id,
        total_amount=booking.total_amount,
        currency=booking.currency,
        customer_name=booking.customer_name,
        customer_email=booking.customer_email,
        email_sent=booking.email_sent,
        payment_date=booking.payment_date,
        confirmed_at=booking.confirmed_at,
        created_at=booking.created_at,
    )


def _result_response(result: ReconciliationResult) -> ReconciliationResponse:
    summary = result.summary
    return ReconciliationResponse(
        local=_booking_response(result.local) if result.local else None,
        remote=RemoteSnapshotResponse(
            order_id=result.remote.order_id,
            order=result.remote.order,
            transactions=result.remote.transactions,
            error=result.remote.error,
        ),
        summary=ReconciliationSummaryResponse(
            remote_status=summary.remote_status,
            status_code=summary.status_code,
            code_type=summary.code_type,
            code_description=summary.code_description,
            recommended_action=summary.recommended_action,
            discrepancy=summary.discrepancy,
            inconclusive=summary.inconclusive,
        ),
    )


@router.get('', response_model=ReconciliationResponse | ReconciliationBatchResponse)
@Logger.io
async def reconcile_payment(
    booking_id: Optional[str] = Query(default=None, alias='bookingId'),
    order_id: Optional[str] = Query(default=None, alias='orderId'),
    customer_name: Optional[str] = Query(default=None, alias='customerName'),
    scan_pending: bool = Query(default=False, alias='scanPending'),
    admin: Caller = Depends(require_admin),
    use_case: ReconcilePaymentUseCase = Depends(ReconcilePaymentUseCase.depends),
) -> ReconciliationResponse | ReconciliationBatchResponse:
    """Compare local payment state with the bank gateway. Never writes."""
    with tracer.start_as_current_span('controller.reconcile_payment') as span:
        span.set_attribute('admin.id', admin.identity)
        result = await use_case.execute(
            booking_id=booking_id,
            order_id=order_id,
            customer_name=customer_name,
            scan_pending=scan_pending,
        )

        if isinstance(result, list):
            responses = [_result_response(r) for r in result]
            return ReconciliationBatchResponse(
                count=len(responses),
                discrepancies=sum(1 for r in result if r.summary.discrepancy),
                results=responses,
            )
        return _result_response(result)


@router.post('', response_model=ApplyReconciliationResponse)
@Logger.io
async def apply_reconciliation(
    request: ApplyReconciliationRequest,
    admin: Caller = Depends(require_admin),
    use_case: ApplyReconciliationUseCase = Depends(ApplyReconciliationUseCase.depends),
) -> ApplyReconciliationResponse:
    with tracer.start_as_current_span('controller.apply_reconciliation') as span:
        span.set_attribute('admin.id', admin.identity)
        span.set_attribute('booking.id', request.booking_id)
        span.set_attribute('reconcile.action', request.action)

        result = await use_case.execute(
            booking_id=request.booking_id, action=request.action, resend=request.resend
        )
        return ApplyReconciliationResponse(
            success=result.success,
            message=result.message,
            booking=_booking_response(result.booking),
        )
