from src.service.shared_kernel.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)


__all__ = ['BookingStatus', 'PaymentMethod', 'PaymentStatus']
