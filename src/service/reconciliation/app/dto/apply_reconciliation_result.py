"""Applier result DTO."""

import attrs

from src.service.shared_kernel.domain.entity.booking_entity import Booking


@attrs.define(frozen=True)
class ApplyReconciliationResult:
    success: bool
    message: str
    booking: Booking
