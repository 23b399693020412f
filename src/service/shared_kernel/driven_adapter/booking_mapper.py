"""Booking ORM model <-> entity mapping shared by admission and reconciliation repos"""

from decimal import Decimal

from src.service.shared_kernel.domain.entity.booking_entity import Booking, BookingTicket
from src.service.shared_kernel.domain.enum.booking_status import (
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
)
from src.service.shared_kernel.domain.value_object.event_snapshot import EventSnapshot
from src.service.shared_kernel.driven_adapter.model.booking_model import (
    BookingModel,
    BookingTicketModel,
)


def to_ticket_entity(db_ticket: BookingTicketModel) -> BookingTicket:
    return BookingTicket(
        ticket_id=db_ticket.ticket_id,
        ticket_name=db_ticket.ticket_name,
        price=Decimal(db_ticket.price or 0),
        qr_code=db_ticket.qr_code,
        is_used=db_ticket.is_used,
        used_at=db_ticket.used_at,
        validated_by=db_ticket.validated_by,
    )


def to_booking_entity(db_booking: BookingModel) -> Booking:
    db_event = db_booking.event
    event = (
        EventSnapshot(
            id=db_event.id,
            title=db_event.title,
            date=db_event.date,
            time=db_event.time,
            venue=db_event.venue,
            location=db_event.location,
        )
        if db_event is not None
        else EventSnapshot(id=db_booking.event_id)
    )
    return Booking(
        id=db_booking.id,
        user_id=db_booking.user_id,
        event=event,
        tickets=[to_ticket_entity(t) for t in db_booking.tickets],
        booking_reference=db_booking.booking_reference,
        status=BookingStatus(db_booking.status),
        payment_status=PaymentStatus(db_booking.payment_status),
        payment_method=PaymentMethod(db_booking.payment_method),
        gateway_order_id=db_booking.gateway_order_id,
        gateway_transaction_id=db_booking.gateway_transaction_id,
        total_amount=Decimal(db_booking.total_amount or 0),
        currency=db_booking.currency,
        customer_name=db_booking.customer_name,
        customer_email=db_booking.customer_email,
        email_sent=db_booking.email_sent,
        payment_date=db_booking.payment_date,
        confirmed_at=db_booking.confirmed_at,
        created_at=db_booking.created_at,
        updated_at=db_booking.updated_at,
    )
