from src.service.reconciliation.domain.enum.reconciliation_enum import (
    RecommendedAction,
    ResponseCodeType,
)


__all__ = ['RecommendedAction', 'ResponseCodeType']
