"""
Booking Ticket Command Repository Interface

Lookup of bookings for admission and the single write the validator owns:
flipping `is_used` on one ticket entry.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from src.service.shared_kernel.domain.entity.booking_entity import Booking


class IBookingTicketCommandRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def find_by_event_owner_ticket(
        self, *, event_id: str, user_id: str, ticket_id: str
    ) -> Booking | None:
        """
        Locate the booking of `user_id` for `event_id` whose ticket list contains `ticket_id`.

        Returns:
            Booking entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_ticket_code(self, *, code: str) -> Booking | None:
        """Locate a booking by a ticket's id or printed code (hand scanner input)"""
        pass

    @abstractmethod
    async def mark_ticket_used(
        self, *, booking_id: str, ticket_id: str, validated_by: str, used_at: datetime
    ) -> Booking | None:
        """
        Conditionally admit one ticket: set is_used only where it is still false.

        Returns:
            The updated booking, or None when no row matched because another
            scan admitted the ticket first
        """
        pass
