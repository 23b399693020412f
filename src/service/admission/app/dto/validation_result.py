"""Validation request context and result DTOs."""

from datetime import datetime
from typing import Optional

import attrs

from src.service.admission.domain.enum.validation_enum import RejectionReason, ValidationType


@attrs.define(frozen=True)
class ScanContext:
    """Where and how a scan happened; copied into the audit entry"""

    validation_type: ValidationType = ValidationType.ENTRY
    location: Optional[str] = None
    user_agent: Optional[str] = None
    ip: Optional[str] = None


@attrs.define(frozen=True)
class TicketSummary:
    ticket_id: str
    ticket_name: str
    is_used: bool
    used_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    is_gift: bool = False


@attrs.define(frozen=True)
class EventSummary:
    id: str
    title: str
    date: Optional[datetime] = None
    time: str = ''
    venue: str = ''


@attrs.define(frozen=True)
class BookingSummary:
    id: str
    booking_reference: str
    customer_name: str = ''
    ticket_count: int = 1


@attrs.define(frozen=True)
class ValidationResult:
    """
    Outcome of one scan.

    success=False with an `error` is a soft rejection: the state machine said
    no, an audit entry was written and `message` explains why to the operator.
    """

    success: bool
    message: str
    error: Optional[RejectionReason] = None
    ticket: Optional[TicketSummary] = None
    event: Optional[EventSummary] = None
    booking: Optional[BookingSummary] = None
    event_date: Optional[str] = None
