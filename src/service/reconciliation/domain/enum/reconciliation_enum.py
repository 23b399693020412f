from enum import StrEnum


class RecommendedAction(StrEnum):
    NONE = 'none'
    MARK_PAID_AND_RESEND = 'markPaidAndResend'
    MARK_FAILED = 'markFailed'


class ResponseCodeType(StrEnum):
    SUCCESS = 'success'
    DECLINE = 'decline'
    ERROR = 'error'
    TECHNICAL = 'technical'
    UNKNOWN = 'unknown'
