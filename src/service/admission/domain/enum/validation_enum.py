"""Admission enums"""

from enum import StrEnum


class GiftTicketStatus(StrEnum):
    """Email delivery status; independent of admission"""

    PENDING = 'pending'
    SENT = 'sent'
    FAILED = 'failed'


class ValidationType(StrEnum):
    ENTRY = 'entry'
    EXIT = 'exit'
    GENERAL = 'general'


class ValidationLogStatus(StrEnum):
    VALIDATED = 'validated'
    REJECTED = 'rejected'
    FLAGGED = 'flagged'  # lost a concurrent admission race, likely a duplicated code


class ScanMethod(StrEnum):
    QR = 'qr'
    MANUAL = 'manual'
    NFC = 'nfc'


class RejectionReason(StrEnum):
    ALREADY_VALIDATED = 'already validated'
    WRONG_DATE = 'wrong date'
    OUTSIDE_WINDOW = 'outside window'
