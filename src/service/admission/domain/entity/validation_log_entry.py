from datetime import datetime, timezone
from typing import Optional

import attrs
from uuid_utils import uuid7

from src.service.admission.domain.enum.validation_enum import (
    ScanMethod,
    ValidationLogStatus,
    ValidationType,
)


NOTES_MAX_LENGTH = 1000
LOCATION_MAX_LENGTH = 200


@attrs.define(frozen=True)
class DeviceInfo:
    user_agent: Optional[str] = None
    ip: Optional[str] = None


@attrs.define(frozen=True)
class ScanMetadata:
    ticket_type: str = ''
    ticket_quantity: int = 1
    scan_method: ScanMethod = ScanMethod.QR


@attrs.define(frozen=True)
class ValidationLogEntry:
    """One admission attempt; written once, never updated"""

    id: str
    validator_id: str
    validator_name: str
    booking_id: str
    ticket_id: str
    event_id: str
    event_title: str
    user_id: str
    user_name: str
    status: ValidationLogStatus
    validation_type: ValidationType = ValidationType.ENTRY
    notes: str = ''
    location: Optional[str] = None
    device_info: DeviceInfo = attrs.field(factory=DeviceInfo)
    scan_metadata: ScanMetadata = attrs.field(factory=ScanMetadata)
    created_at: datetime = attrs.field(factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(
        cls,
        *,
        validator_id: str,
        validator_name: str,
        booking_id: str,
        ticket_id: str,
        event_id: str,
        event_title: str,
        user_id: str,
        user_name: str,
        status: ValidationLogStatus,
        notes: str = '',
        validation_type: ValidationType = ValidationType.ENTRY,
        location: Optional[str] = None,
        device_info: Optional[DeviceInfo] = None,
        scan_metadata: Optional[ScanMetadata] = None,
    ) -> 'ValidationLogEntry':
        return cls(
            id=str(uuid7()),
            validator_id=validator_id,
            validator_name=validator_name,
            booking_id=booking_id,
            ticket_id=ticket_id,
            event_id=event_id,
            event_title=event_title,
            user_id=user_id,
            user_name=user_name,
            status=status,
            validation_type=validation_type,
            notes=notes[:NOTES_MAX_LENGTH],
            location=location[:LOCATION_MAX_LENGTH] if location else None,
            device_info=device_info or DeviceInfo(),
            scan_metadata=scan_metadata or ScanMetadata(),
        )
