"""Application layer DTOs"""

from src.service.reconciliation.app.dto.apply_reconciliation_result import (
    ApplyReconciliationResult,
)

__all__ = ['ApplyReconciliationResult']
