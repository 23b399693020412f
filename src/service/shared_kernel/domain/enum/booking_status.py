"""Booking and payment status enums"""

from enum import StrEnum


class BookingStatus(StrEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    REFUNDED = 'refunded'


class PaymentStatus(StrEnum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'
    REFUNDED = 'refunded'


class PaymentMethod(StrEnum):
    STRIPE = 'stripe'
    RAIFFEISEN = 'raiffeisen'
    DIRECT = 'direct'
