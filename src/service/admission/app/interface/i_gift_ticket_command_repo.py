from abc import ABC, abstractmethod
from datetime import datetime

from src.service.admission.domain.entity.gift_ticket_entity import GiftTicket


class IGiftTicketCommandRepo(ABC):
    @abstractmethod
    async def get_by_ticket_id(self, *, ticket_id: str) -> GiftTicket | None:
        pass

    @abstractmethod
    async def mark_validated(
        self, *, ticket_id: str, validated_by: str, validated_at: datetime
    ) -> GiftTicket | None:
        """
        Conditionally admit a delivered gift ticket (status sent, not yet validated).

        Returns:
            The updated gift ticket, or None when no row matched
        """
        pass
