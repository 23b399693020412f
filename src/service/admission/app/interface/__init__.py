"""Application layer interfaces (Ports)"""

from src.service.admission.app.interface.i_booking_ticket_command_repo import (
    IBookingTicketCommandRepo,
)
from src.service.admission.app.interface.i_gift_ticket_command_repo import IGiftTicketCommandRepo
from src.service.admission.app.interface.i_validation_log_repo import IValidationLogRepo
from src.service.admission.app.interface.i_validation_policy_provider import (
    IValidationPolicyProvider,
)


__all__ = [
    'IBookingTicketCommandRepo',
    'IGiftTicketCommandRepo',
    'IValidationLogRepo',
    'IValidationPolicyProvider',
]
