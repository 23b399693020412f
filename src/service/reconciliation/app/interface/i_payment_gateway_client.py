"""
Payment Gateway Client Interface

Read-only view of the bank gateway. Implementations raise GatewayError for
any failed call (network error, non-2xx status, timeout, unreadable body).
"""

from abc import ABC, abstractmethod
from typing import Any


class IPaymentGatewayClient(ABC):
    @abstractmethod
    async def get_order_details(self, *, order_id: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def get_order_transactions(self, *, order_id: str) -> Any:
        """
        Transaction history of an order.

        Returns:
            `{"transactions": [...]}` or a bare list, as the gateway sends it
        """
        pass
