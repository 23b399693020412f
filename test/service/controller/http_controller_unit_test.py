"""
HTTP surface tests

Use cases are replaced through FastAPI dependency overrides, so these tests
check request decoding, caller headers, status codes and error bodies only.
"""

from collections.abc import AsyncIterator, Generator
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest

from src.platform.app_factory import create_app
from src.platform.exception.exceptions import DomainError
from src.service.admission.app.command.validate_ticket_use_case import ValidateTicketUseCase
from src.service.admission.app.dto.validation_result import TicketSummary, ValidationResult
from src.service.admission.domain.enum.validation_enum import RejectionReason
from src.service.reconciliation.app.command.apply_reconciliation_use_case import (
    ApplyReconciliationUseCase,
)
from src.service.reconciliation.app.dto.apply_reconciliation_result import (
    ApplyReconciliationResult,
)
from src.service.reconciliation.app.query.reconcile_payment_use_case import (
    ReconcilePaymentUseCase,
)
from src.service.reconciliation.domain.value_object.reconciliation_result import (
    RemoteSnapshot,
    ReconciliationResult,
    summarize,
)
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus, PaymentStatus
from src.service.shared_kernel.domain.value_object.calendar_date import CalendarDate
from test.service.test_helpers import make_booking


VALIDATOR_HEADERS = {'X-User-Id': 'val_3', 'X-User-Role': 'validator'}
ADMIN_HEADERS = {'X-User-Id': 'adm_1', 'X-User-Role': 'admin'}


@asynccontextmanager
async def _no_lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield


@pytest.fixture
def validate_use_case() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def reconcile_use_case() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def apply_use_case() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(
    validate_use_case: AsyncMock, reconcile_use_case: AsyncMock, apply_use_case: AsyncMock
) -> Generator[TestClient, None, None]:
    app = create_app(lifespan=_no_lifespan, title_suffix=' (Test)')
    app.dependency_overrides[ValidateTicketUseCase.depends] = lambda: validate_use_case
    app.dependency_overrides[ReconcilePaymentUseCase.depends] = lambda: reconcile_use_case
    app.dependency_overrides[ApplyReconciliationUseCase.depends] = lambda: apply_use_case
    with TestClient(app) as test_client:
        yield test_client


@pytest.mark.unit
class TestValidateEndpoint:
    def test_success_returns_200(self, client: TestClient, validate_use_case: AsyncMock) -> None:
        # Arrange
        validate_use_case.execute.return_value = ValidationResult(
            success=True,
            message='Ticket validated successfully',
            ticket=TicketSummary(
                ticket_id='TKT-8F2A',
                ticket_name='General Admission',
                is_used=True,
                used_at=datetime(2026, 6, 14, 19, 2, 11, tzinfo=timezone.utc),
                validated_by='val_3',
            ),
        )

        # Act
        response = client.post(
            '/api/validate',
            json={'qrCodeData': 'QR-8F2A', 'validationDate': '2026-06-14', 'location': 'Gate 3'},
            headers={**VALIDATOR_HEADERS, 'User-Agent': 'scanner/1.0'},
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['ticket']['ticket_id'] == 'TKT-8F2A'

        kwargs = validate_use_case.execute.await_args.kwargs
        assert kwargs['qr_code_data'] == 'QR-8F2A'
        assert kwargs['validation_date'] == CalendarDate(2026, 6, 14)
        assert kwargs['caller'].identity == 'val_3'
        assert kwargs['context'].location == 'Gate 3'
        assert kwargs['context'].user_agent == 'scanner/1.0'

    def test_soft_rejection_returns_400_with_result(
        self, client: TestClient, validate_use_case: AsyncMock
    ) -> None:
        validate_use_case.execute.return_value = ValidationResult(
            success=False,
            message='This ticket is valid for 2026-06-14, not 2026-06-15',
            error=RejectionReason.WRONG_DATE,
            event_date='2026-06-14',
        )

        response = client.post(
            '/api/validate', json={'qrCodeData': 'QR-8F2A'}, headers=VALIDATOR_HEADERS
        )

        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['error'] == 'wrong date'
        assert body['event_date'] == '2026-06-14'

    def test_missing_identity_is_401(self, client: TestClient, validate_use_case: AsyncMock) -> None:
        response = client.post('/api/validate', json={'qrCodeData': 'QR-8F2A'})

        assert response.status_code == 401
        validate_use_case.execute.assert_not_awaited()

    def test_domain_error_is_400_detail(
        self, client: TestClient, validate_use_case: AsyncMock
    ) -> None:
        validate_use_case.execute.side_effect = DomainError('QR code data is required')

        response = client.post(
            '/api/validate', json={'qrCodeData': '{}'}, headers=VALIDATOR_HEADERS
        )

        assert response.status_code == 400
        assert response.json() == {'detail': 'QR code data is required'}

    def test_invalid_validation_date_is_400(
        self, client: TestClient, validate_use_case: AsyncMock
    ) -> None:
        response = client.post(
            '/api/validate',
            json={'qrCodeData': 'QR-8F2A', 'validationDate': 'tomorrow'},
            headers=VALIDATOR_HEADERS,
        )

        assert response.status_code == 400
        validate_use_case.execute.assert_not_awaited()


@pytest.mark.unit
class TestReconcileEndpoints:
    def test_non_admin_is_forbidden(self, client: TestClient, reconcile_use_case: AsyncMock) -> None:
        response = client.get('/api/admin/reconcile?bookingId=bk_01', headers=VALIDATOR_HEADERS)

        assert response.status_code == 403
        reconcile_use_case.execute.assert_not_awaited()

    def test_single_booking(self, client: TestClient, reconcile_use_case: AsyncMock) -> None:
        # Arrange
        booking = make_booking(
            event_at=None, status=BookingStatus.PENDING, payment_status=PaymentStatus.PENDING
        )
        remote = RemoteSnapshot(
            order_id='ord_77', transactions=[{'status': 'SUCCESS', 'statusCode': '0000'}]
        )
        reconcile_use_case.execute.return_value = ReconciliationResult(
            local=booking, remote=remote, summary=summarize(booking=booking, remote=remote)
        )

        # Act
        response = client.get('/api/admin/reconcile?bookingId=bk_01', headers=ADMIN_HEADERS)

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body['local']['id'] == 'bk_01'
        assert body['summary']['recommended_action'] == 'markPaidAndResend'
        assert body['summary']['discrepancy'] is True
        reconcile_use_case.execute.assert_awaited_once_with(
            booking_id='bk_01', order_id=None, customer_name=None, scan_pending=False
        )

    def test_pending_sweep_returns_batch(
        self, client: TestClient, reconcile_use_case: AsyncMock
    ) -> None:
        remote = RemoteSnapshot(order_id='ord_77', error='timed out', transactions_unavailable=True)
        reconcile_use_case.execute.return_value = [
            ReconciliationResult(local=None, remote=remote, summary=summarize(booking=None, remote=remote))
        ]

        response = client.get('/api/admin/reconcile?scanPending=true', headers=ADMIN_HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body['count'] == 1
        assert body['discrepancies'] == 0
        assert body['results'][0]['summary']['inconclusive'] is True

    def test_apply(self, client: TestClient, apply_use_case: AsyncMock) -> None:
        booking = make_booking(event_at=None)
        apply_use_case.execute.return_value = ApplyReconciliationResult(
            success=True, message='Booking marked as paid', booking=booking
        )

        response = client.post(
            '/api/admin/reconcile',
            json={'bookingId': 'bk_01', 'action': 'markPaidAndResend', 'resend': True},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 200
        assert response.json()['booking']['status'] == 'confirmed'
        apply_use_case.execute.assert_awaited_once_with(
            booking_id='bk_01', action='markPaidAndResend', resend=True
        )

    def test_apply_rejects_unknown_action(
        self, client: TestClient, apply_use_case: AsyncMock
    ) -> None:
        response = client.post(
            '/api/admin/reconcile',
            json={'bookingId': 'bk_01', 'action': 'refund'},
            headers=ADMIN_HEADERS,
        )

        assert response.status_code == 400
        apply_use_case.execute.assert_not_awaited()


@pytest.mark.unit
class TestOpsEndpoints:
    def test_health(self, client: TestClient) -> None:
        response = client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    def test_request_id_is_echoed(self, client: TestClient) -> None:
        response = client.get('/health', headers={'X-Request-Id': 'req-abc'})

        assert response.headers['X-Request-Id'] == 'req-abc'

    def test_request_id_is_minted_when_missing(self, client: TestClient) -> None:
        response = client.get('/health')

        assert response.headers['X-Request-Id']
