import time
from typing import Any, List, Optional, Self

import anyio
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, GatewayError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.admission_metrics import admission_metrics
from src.service.reconciliation.app.interface.i_payment_gateway_client import (
    IPaymentGatewayClient,
)
from src.service.reconciliation.app.interface.i_reconciliation_booking_repo import (
    IReconciliationBookingRepo,
)
from src.service.reconciliation.domain.value_object.reconciliation_result import (
    ReconciliationResult,
    RemoteSnapshot,
    summarize,
)
from src.service.reconciliation.domain.value_object.remote_status import extract_transactions
from src.service.shared_kernel.domain.entity.booking_entity import Booking


tracer = trace.get_tracer(__name__)


class ReconcilePaymentUseCase:
    """
    Compare local booking payment state with the bank gateway.

    Read-only: it recommends a corrective action, it never applies one.
    Gateway failures are carried in `remote.error` of the affected result.
    """

    def __init__(
        self,
        *,
        booking_repo: IReconciliationBookingRepo,
        gateway_client: IPaymentGatewayClient,
        batch_limit: int = settings.RECONCILE_BATCH_LIMIT,
        max_concurrency: int = settings.RECONCILE_MAX_CONCURRENCY,
        timeout_seconds: float = settings.RAIACCEPT_TIMEOUT_SECONDS,
    ) -> None:
        self.booking_repo = booking_repo
        self.gateway_client = gateway_client
        self.batch_limit = batch_limit
        self.max_concurrency = max_concurrency
        self.timeout_seconds = timeout_seconds

    @classmethod
    @inject
    def depends(
        cls,
        booking_repo: IReconciliationBookingRepo = Depends(
            Provide[Container.reconciliation_booking_repo]
        ),
        gateway_client: IPaymentGatewayClient = Depends(Provide[Container.payment_gateway_client]),
    ) -> Self:
        return cls(booking_repo=booking_repo, gateway_client=gateway_client)

    @Logger.io
    async def execute(
        self,
        *,
        booking_id: Optional[str] = None,
        order_id: Optional[str] = None,
        customer_name: Optional[str] = None,
        scan_pending: bool = False,
    ) -> ReconciliationResult | List[ReconciliationResult]:
        """Run exactly one mode: booking id, gateway order id, customer name or pending sweep."""
        # A blank customer name counts as absent
        has_customer = bool(customer_name and customer_name.strip())
        selected = [bool(booking_id), bool(order_id), has_customer, scan_pending]
        if sum(selected) != 1:
            raise DomainError(
                'Provide exactly one of bookingId, orderId, customerName or scanPending'
            )

        if booking_id:
            return await self.reconcile_booking(booking_id=booking_id)
        if order_id:
            return await self.reconcile_order(order_id=order_id)
        if has_customer:
            return await self.reconcile_customer(customer_name=customer_name or '')
        return await self.reconcile_pending()

    async def reconcile_booking(self, *, booking_id: str) -> ReconciliationResult:
        booking = await self.booking_repo.get_by_id(booking_id=booking_id)
        if not booking:
            raise NotFoundError('Booking not found')
        if not booking.gateway_order_id:
            raise DomainError('No gateway order id for this booking')
        return await self._reconcile(booking=booking, order_id=booking.gateway_order_id)

    async def reconcile_order(self, *, order_id: str) -> ReconciliationResult:
        booking = await self.booking_repo.get_by_gateway_order_id(order_id=order_id)
        return await self._reconcile(
            booking=booking,
            order_id=(booking.gateway_order_id if booking else None) or order_id,
        )

    async def reconcile_customer(self, *, customer_name: str) -> List[ReconciliationResult]:
        name = customer_name.strip()
        if not name:
            raise DomainError('customerName must not be empty')
        bookings = await self.booking_repo.search_by_customer_name(
            name=name, limit=self.batch_limit
        )
        return await self._reconcile_many(bookings)

    async def reconcile_pending(self) -> List[ReconciliationResult]:
        bookings = await self.booking_repo.list_pending_with_gateway_order(limit=self.batch_limit)
        return await self._reconcile_many(bookings)

    async def _reconcile_many(self, bookings: List[Booking]) -> List[ReconciliationResult]:
        """Reconcile independently with bounded concurrency; output keeps input order."""
        bookings = [b for b in bookings if b.gateway_order_id]
        results: list[Optional[ReconciliationResult]] = [None] * len(bookings)
        limiter = anyio.CapacityLimiter(self.max_concurrency)

        async def run(index: int, booking: Booking) -> None:
            async with limiter:
                results[index] = await self._reconcile(
                    booking=booking, order_id=booking.gateway_order_id or ''
                )

        async with anyio.create_task_group() as tg:
            for index, booking in enumerate(bookings):
                tg.start_soon(run, index, booking)

        Logger.base.info(f'🔎 [RECONCILE] Batch of {len(bookings)} bookings reconciled')
        return [r for r in results if r is not None]

    async def _reconcile(self, *, booking: Optional[Booking], order_id: str) -> ReconciliationResult:
        if not order_id:
            raise DomainError('No gateway order id could be determined')

        with tracer.start_as_current_span(
            'use_case.reconcile_payment',
            attributes={'order.id': order_id, 'booking.id': booking.id if booking else ''},
        ) as span:
            remote = await self._fetch_remote(order_id=order_id)
            summary = summarize(booking=booking, remote=remote)

            span.set_attribute('reconcile.action', str(summary.recommended_action))
            span.set_attribute('reconcile.discrepancy', summary.discrepancy)
            admission_metrics.record_reconciliation(
                action=str(summary.recommended_action), discrepancy=summary.discrepancy
            )
            if summary.discrepancy:
                Logger.base.warning(
                    f'⚠️ [RECONCILE] Order {order_id} (booking {booking.id if booking else "-"}): '
                    f'remote {summary.remote_status}/{summary.status_code}, '
                    f'recommended {summary.recommended_action}'
                )
            return ReconciliationResult(local=booking, remote=remote, summary=summary)

    async def _call_gateway(self, operation: str, call: Any) -> tuple[Any, Optional[str]]:
        """Await one gateway call under the timeout; failures come back as an error string."""
        started = time.perf_counter()
        try:
            with anyio.fail_after(self.timeout_seconds):
                value = await call()
        except TimeoutError:
            error = f'{operation}: gateway timed out after {self.timeout_seconds}s'
        except GatewayError as e:
            error = f'{operation}: {e.message}'
        except Exception as e:
            Logger.base.opt(exception=e).error(f'💥 [RECONCILE] {operation} raised unexpectedly')
            error = f'{operation}: {type(e).__name__}: {e}'
        else:
            admission_metrics.record_gateway_call(
                operation=operation, duration=time.perf_counter() - started, failed=False
            )
            return value, None

        admission_metrics.record_gateway_call(
            operation=operation, duration=time.perf_counter() - started, failed=True
        )
        Logger.base.warning(f'🌐 [RECONCILE] {error}')
        return None, error

    async def _fetch_remote(self, *, order_id: str) -> RemoteSnapshot:
        outcome: dict[str, tuple[Any, Optional[str]]] = {}

        async def fetch(operation: str, call: Any) -> None:
            outcome[operation] = await self._call_gateway(operation, call)

        async with anyio.create_task_group() as tg:
            tg.start_soon(
                fetch,
                'order_details',
                lambda: self.gateway_client.get_order_details(order_id=order_id),
            )
            tg.start_soon(
                fetch,
                'order_transactions',
                lambda: self.gateway_client.get_order_transactions(order_id=order_id),
            )

        order, order_error = outcome['order_details']
        transactions, tx_error = outcome['order_transactions']
        errors = [e for e in (order_error, tx_error) if e]
        return RemoteSnapshot(
            order_id=order_id,
            order=order if isinstance(order, dict) else None,
            transactions=extract_transactions(transactions),
            error='; '.join(errors) or None,
            transactions_unavailable=tx_error is not None,
        )
