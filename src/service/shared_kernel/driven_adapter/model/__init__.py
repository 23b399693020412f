"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.shared_kernel.driven_adapter.model.booking_model import (
    BookingModel,
    BookingTicketModel,
)
from src.service.shared_kernel.driven_adapter.model.event_model import EventModel
from src.service.shared_kernel.driven_adapter.model.gift_ticket_model import GiftTicketModel
from src.service.shared_kernel.driven_adapter.model.validation_log_model import (
    ValidationLogModel,
)
from src.service.shared_kernel.driven_adapter.model.validation_settings_model import (
    ValidationSettingsModel,
)

__all__ = [
    'BookingModel',
    'BookingTicketModel',
    'EventModel',
    'GiftTicketModel',
    'ValidationLogModel',
    'ValidationSettingsModel',
]
