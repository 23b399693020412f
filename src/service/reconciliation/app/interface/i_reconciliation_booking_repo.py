from abc import ABC, abstractmethod
from typing import List

from src.service.shared_kernel.domain.entity.booking_entity import Booking


class IReconciliationBookingRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def get_by_gateway_order_id(self, *, order_id: str) -> Booking | None:
        pass

    @abstractmethod
    async def search_by_customer_name(self, *, name: str, limit: int) -> List[Booking]:
        """
        Bookings whose customer name contains `name` (case-insensitive) and which
        carry a gateway order id, newest first.
        """
        pass

    @abstractmethod
    async def list_pending_with_gateway_order(self, *, limit: int) -> List[Booking]:
        """Pending bookings that carry a gateway order id, newest first"""
        pass

    @abstractmethod
    async def save_payment_state(self, *, booking: Booking) -> Booking:
        """Persist status, payment status, payment/confirmation dates and email_sent"""
        pass
