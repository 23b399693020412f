from src.service.admission.domain.enum.validation_enum import (
    GiftTicketStatus,
    RejectionReason,
    ScanMethod,
    ValidationLogStatus,
    ValidationType,
)


__all__ = [
    'GiftTicketStatus',
    'RejectionReason',
    'ScanMethod',
    'ValidationLogStatus',
    'ValidationType',
]
