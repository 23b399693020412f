"""
Scanned payload decoding

Two channels reach the validator:

- QR codes carry a JSON object:
  {"ticketId": ..., "eventId": ..., "userId": ..., "bookingId": ...}
- Hand scanners and manual entry send the bare ticket code.
"""

from typing import Any, Optional

import attrs
import orjson

from src.platform.exception.exceptions import DomainError
from src.service.admission.domain.enum.validation_enum import ScanMethod


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or value == '':
        return None
    if isinstance(value, bool) or not isinstance(value, str | int):
        raise DomainError(f'Invalid QR code data - {key} must be a string')
    return str(value)


@attrs.define(frozen=True)
class ScanPayload:
    ticket_id: str
    scan_method: ScanMethod
    event_id: Optional[str] = None
    user_id: Optional[str] = None
    booking_id: Optional[str] = None

    @property
    def is_raw_code(self) -> bool:
        return self.scan_method != ScanMethod.QR

    @classmethod
    def parse(cls, raw: str) -> 'ScanPayload':
        text = (raw or '').strip()
        if not text:
            raise DomainError('QR code data is required')

        if text[0] not in '{[':
            return cls(ticket_id=text, scan_method=ScanMethod.MANUAL)

        try:
            data = orjson.loads(text)
        except orjson.JSONDecodeError:
            raise DomainError('Invalid QR code format')
        if not isinstance(data, dict):
            raise DomainError('Invalid QR code format - expected a JSON object')

        ticket_id = data.get('ticketId')
        if not isinstance(ticket_id, str) or not ticket_id.strip():
            raise DomainError('Invalid QR code data - ticketId is required')

        return cls(
            ticket_id=ticket_id.strip(),
            scan_method=ScanMethod.QR,
            event_id=_optional_str(data, 'eventId'),
            user_id=_optional_str(data, 'userId'),
            booking_id=_optional_str(data, 'bookingId'),
        )

    def require_booking_fields(self) -> None:
        if not (self.event_id and self.ticket_id and self.user_id):
            raise DomainError('Incomplete QR code data - missing eventId, ticketId, or userId')
