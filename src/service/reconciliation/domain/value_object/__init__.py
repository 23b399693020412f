from src.service.reconciliation.domain.value_object.reconciliation_result import (
    ReconciliationResult,
    ReconciliationSummary,
    RemoteSnapshot,
)
from src.service.reconciliation.domain.value_object.remote_status import (
    RemoteStatus,
    extract_transactions,
    normalize_remote_status,
)


__all__ = [
    'ReconciliationResult',
    'ReconciliationSummary',
    'RemoteSnapshot',
    'RemoteStatus',
    'extract_transactions',
    'normalize_remote_status',
]
