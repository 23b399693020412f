from datetime import datetime
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError, NotReadyError
from src.service.admission.domain.enum.validation_enum import GiftTicketStatus


GIFT_TICKET_PREFIX = 'GFT-'


def is_gift_ticket_id(ticket_id: str) -> bool:
    return ticket_id.startswith(GIFT_TICKET_PREFIX)


@attrs.define
class GiftTicket:
    """Standalone complimentary ticket, delivered by email and admitted once"""

    ticket_id: str
    recipient_email: str
    status: GiftTicketStatus = GiftTicketStatus.PENDING
    customer_name: str = ''
    ticket_type: str = ''
    price: Decimal = Decimal('0')
    currency: str = 'EUR'
    booking_reference: str = ''
    event_title: str = ''
    event_date: Optional[datetime] = None
    event_time: str = ''
    event_venue: str = ''
    is_validated: bool = False
    validated_at: Optional[datetime] = None
    validated_by: Optional[str] = None
    sent_at: Optional[datetime] = None

    def ensure_deliverable(self) -> None:
        """Raises NotReadyError unless the ticket email has been sent"""
        if self.status != GiftTicketStatus.SENT:
            raise NotReadyError(
                f'Gift ticket {self.ticket_id} has not been delivered yet (status: {self.status})'
            )

    def mark_validated(self, *, validated_by: str, validated_at: datetime) -> 'GiftTicket':
        """
        Write-once validation for in-memory repositories; the database repo
        enforces the same rule with a conditional UPDATE.
        """
        self.ensure_deliverable()
        if self.is_validated:
            raise DomainError(f'Gift ticket {self.ticket_id} already validated')
        return attrs.evolve(
            self, is_validated=True, validated_at=validated_at, validated_by=validated_by
        )
