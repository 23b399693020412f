from datetime import datetime
from decimal import Decimal
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ApplyReconciliationRequest(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'example': {'bookingId': 'bk_01J8', 'action': 'markPaidAndResend', 'resend': True}
        },
    )

    booking_id: str = Field(alias='bookingId', min_length=1)
    action: Literal['markPaidAndResend', 'markFailed']
    resend: bool = False


class LocalBookingResponse(BaseModel):
    id: str
    booking_reference: str
    user_id: str
    event_id: str
    status: str
    payment_status: str
    payment_method: str
    gateway_order_id: Optional[str] = None
    total_amount: Decimal
    currency: str
    customer_name: str = ''
    customer_email: str = ''
    email_sent: bool = False
    payment_date: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class RemoteSnapshotResponse(BaseModel):
    order_id: str
    order: Optional[dict[str, Any]] = None
    transactions: List[dict[str, Any]] = []
    error: Optional[str] = None


class ReconciliationSummaryResponse(BaseModel):
    remote_status: str
    status_code: Optional[str] = None
    code_type: str
    code_description: str
    recommended_action: str
    discrepancy: bool
    inconclusive: bool = False


class ReconciliationResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'local': None,
                'remote': {
                    'order_id': 'ord_77',
                    'transactions': [{'status': 'SUCCESS', 'statusCode': '0000'}],
                },
                'summary': {
                    'remote_status': 'SUCCESS',
                    'status_code': '0000',
                    'code_type': 'success',
                    'code_description': 'Transaction approved',
                    'recommended_action': 'none',
                    'discrepancy': False,
                },
            }
        },
    }

    local: Optional[LocalBookingResponse] = None
    remote: RemoteSnapshotResponse
    summary: ReconciliationSummaryResponse


class ReconciliationBatchResponse(BaseModel):
    count: int
    discrepancies: int
    results: List[ReconciliationResponse]


class ApplyReconciliationResponse(BaseModel):
    success: bool
    message: str
    booking: LocalBookingResponse
