"""Application layer DTOs"""

from src.service.admission.app.dto.validation_result import (
    BookingSummary,
    EventSummary,
    ScanContext,
    TicketSummary,
    ValidationResult,
)

__all__ = [
    'BookingSummary',
    'EventSummary',
    'ScanContext',
    'TicketSummary',
    'ValidationResult',
]
