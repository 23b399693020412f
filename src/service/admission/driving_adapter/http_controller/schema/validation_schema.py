from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ValidateTicketRequest(BaseModel):
    # Scanner apps send camelCase keys
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'examples': [
                {
                    'qrCodeData': '{"ticketId":"TKT-8F2A","eventId":"evt_42","userId":"user_7"}',
                    'validationDate': '2026-06-14',
                },
                {'qrCodeData': 'GFT-1A2B3C4D'},
            ]
        },
    )

    qr_code_data: str = Field(alias='qrCodeData', min_length=1)
    validation_date: Optional[str] = Field(default=None, alias='validationDate')
    validation_type: Literal['entry', 'exit', 'general'] = Field(
        default='entry', alias='validationType'
    )
    location: Optional[str] = Field(default=None, max_length=200)


class TicketSummaryResponse(BaseModel):
    ticket_id: str
    ticket_name: str
    is_used: bool
    used_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    is_gift: bool = False


class EventSummaryResponse(BaseModel):
    id: str
    title: str
    date: Optional[datetime] = None
    time: str = ''
    venue: str = ''


class BookingSummaryResponse(BaseModel):
    id: str
    booking_reference: str
    customer_name: str = ''
    ticket_count: int = 1


class ValidateTicketResponse(BaseModel):
    model_config = {
        'json_schema_extra': {
            'example': {
                'success': False,
                'message': 'This ticket has already been validated on 2026-06-14 19:02:11 UTC by val_3',
                'error': 'already validated',
                'ticket': {
                    'ticket_id': 'TKT-8F2A',
                    'ticket_name': 'General Admission',
                    'is_used': True,
                    'used_at': '2026-06-14T19:02:11Z',
                    'validated_by': 'val_3',
                    'is_gift': False,
                },
            }
        },
    }

    success: bool
    message: str
    error: Optional[str] = None
    ticket: Optional[TicketSummaryResponse] = None
    event: Optional[EventSummaryResponse] = None
    booking: Optional[BookingSummaryResponse] = None
    event_date: Optional[str] = None
