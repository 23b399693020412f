"""Shared Kernel Value Objects"""

from src.service.shared_kernel.domain.value_object.calendar_date import CalendarDate
from src.service.shared_kernel.domain.value_object.caller import Caller, CallerRole
from src.service.shared_kernel.domain.value_object.event_snapshot import EventSnapshot


__all__ = ['CalendarDate', 'Caller', 'CallerRole', 'EventSnapshot']
