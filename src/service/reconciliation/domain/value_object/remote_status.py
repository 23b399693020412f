"""
Gateway transaction status normalization

The gateway has returned the same facts under different field names across
endpoints and API versions. Each field is read from the first non-empty key in
its precedence list:

    status       <- status, transactionStatus
    status code  <- statusCode, transactionStatusCode

Only the last transaction counts; the gateway lists them chronologically.
"""

from typing import Any, Optional

import attrs

from src.service.reconciliation.domain.enum.reconciliation_enum import ResponseCodeType
from src.service.reconciliation.domain.response_code import SUCCESS_CODE, lookup_code


STATUS_FIELDS = ('status', 'transactionStatus')
STATUS_CODE_FIELDS = ('statusCode', 'transactionStatusCode')

UNKNOWN_STATUS = 'UNKNOWN'
SUCCESS_STATUSES = frozenset({'SUCCESS', 'COMPLETED'})
FAILURE_STATUSES = frozenset({'FAILED', 'DECLINED', 'ERROR', 'CANCELLED'})


def _first_present(record: dict[str, Any], keys: tuple[str, ...]) -> Optional[Any]:
    for key in keys:
        value = record.get(key)
        if value not in (None, ''):
            return value
    return None


def _normalize_code(value: Any) -> Optional[str]:
    if value is None:
        return None
    # JSON numbers lose leading zeros: 0 -> '0000'
    if isinstance(value, int) and not isinstance(value, bool):
        return f'{value:04d}'
    return str(value).strip() or None


def extract_transactions(response: Any) -> list[dict[str, Any]]:
    """Accept `{"transactions": [...]}` or a bare list."""
    if isinstance(response, dict):
        response = response.get('transactions')
    if not isinstance(response, list):
        return []
    return [tx for tx in response if isinstance(tx, dict)]


@attrs.define(frozen=True)
class RemoteStatus:
    status: str
    status_code: Optional[str]
    code_type: ResponseCodeType
    code_description: str

    @property
    def is_success(self) -> bool:
        return (
            self.status_code == SUCCESS_CODE
            or self.code_type == ResponseCodeType.SUCCESS
            or self.status in SUCCESS_STATUSES
        )

    @property
    def is_failure(self) -> bool:
        return (
            self.code_type in (ResponseCodeType.DECLINE, ResponseCodeType.ERROR)
            or self.status in FAILURE_STATUSES
        )


def normalize_remote_status(transactions: list[dict[str, Any]]) -> RemoteStatus:
    if not transactions:
        return RemoteStatus(
            status=UNKNOWN_STATUS,
            status_code=None,
            code_type=ResponseCodeType.UNKNOWN,
            code_description='No transactions found',
        )

    last = transactions[-1]
    status = _first_present(last, STATUS_FIELDS)
    status_code = _normalize_code(_first_present(last, STATUS_CODE_FIELDS))
    code_info = lookup_code(status_code)
    return RemoteStatus(
        status=str(status).strip().upper() if status is not None else UNKNOWN_STATUS,
        status_code=status_code,
        code_type=code_info.type,
        code_description=code_info.description,
    )
