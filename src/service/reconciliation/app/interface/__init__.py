"""Application layer interfaces (Ports)"""

from src.service.reconciliation.app.interface.i_payment_gateway_client import (
    IPaymentGatewayClient,
)
from src.service.reconciliation.app.interface.i_reconciliation_booking_repo import (
    IReconciliationBookingRepo,
)


__all__ = ['IPaymentGatewayClient', 'IReconciliationBookingRepo']
