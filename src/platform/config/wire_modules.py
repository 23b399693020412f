"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.admission.app.command import validate_ticket_use_case
from src.service.reconciliation.app.command import apply_reconciliation_use_case
from src.service.reconciliation.app.query import reconcile_payment_use_case


WIRE_MODULES: list[ModuleType] = [
    validate_ticket_use_case,
    reconcile_payment_use_case,
    apply_reconciliation_use_case,
]
