from datetime import datetime, timezone
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    AuthenticationError,
    BookingNotConfirmedError,
    ForbiddenError,
    InvalidOwnershipError,
    NotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.admission_metrics import admission_metrics
from src.service.admission.app.dto.validation_result import (
    BookingSummary,
    EventSummary,
    ScanContext,
    TicketSummary,
    ValidationResult,
)
from src.service.admission.app.interface.i_booking_ticket_command_repo import (
    IBookingTicketCommandRepo,
)
from src.service.admission.app.interface.i_gift_ticket_command_repo import IGiftTicketCommandRepo
from src.service.admission.app.interface.i_validation_log_repo import IValidationLogRepo
from src.service.admission.app.interface.i_validation_policy_provider import (
    IValidationPolicyProvider,
)
from src.service.admission.domain.entity.gift_ticket_entity import GiftTicket, is_gift_ticket_id
from src.service.admission.domain.entity.validation_log_entry import (
    DeviceInfo,
    ScanMetadata,
    ValidationLogEntry,
)
from src.service.admission.domain.enum.validation_enum import (
    RejectionReason,
    ValidationLogStatus,
)
from src.service.admission.domain.value_object.scan_payload import ScanPayload
from src.service.admission.domain.value_object.validation_policy import ValidationPolicy
from src.service.shared_kernel.domain.entity.booking_entity import Booking, BookingTicket
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus
from src.service.shared_kernel.domain.value_object.calendar_date import CalendarDate
from src.service.shared_kernel.domain.value_object.caller import Caller


tracer = trace.get_tracer(__name__)


@attrs.define(frozen=True)
class _AuditSubject:
    """What a scan resolved to; every audit entry of the call describes it"""

    booking_id: str
    ticket_id: str
    event_id: str
    event_title: str
    user_id: str
    user_name: str
    ticket_type: str
    ticket_quantity: int


def _format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return 'an unknown time'
    return value.astimezone(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')


def _already_validated_message(at: Optional[datetime], by: Optional[str]) -> str:
    message = f'This ticket has already been validated on {_format_timestamp(at)}'
    return f'{message} by {by}' if by else message


class ValidateTicketUseCase:
    """
    Admit a scanned ticket at most once.

    Gates, in order: identity, validator role, payload decoding and scan
    channel, subject resolution (booking ticket or gift ticket), then the
    policy checks. Hard failures raise before any audit entry is written;
    every soft rejection and every admission appends exactly one entry.

    The admission itself is a conditional write. A scan that loses the race
    against a concurrent scan of the same ticket is reported as already
    validated and, with anti-replay enabled, flagged in the audit trail.
    """

    def __init__(
        self,
        *,
        booking_ticket_repo: IBookingTicketCommandRepo,
        gift_ticket_repo: IGiftTicketCommandRepo,
        validation_log_repo: IValidationLogRepo,
        policy_provider: IValidationPolicyProvider,
        calendar_tz: str = settings.VALIDATION_CALENDAR_TZ,
    ) -> None:
        self.booking_ticket_repo = booking_ticket_repo
        self.gift_ticket_repo = gift_ticket_repo
        self.validation_log_repo = validation_log_repo
        self.policy_provider = policy_provider
        self.calendar_tz = calendar_tz

    @classmethod
    @inject
    def depends(
        cls,
        booking_ticket_repo: IBookingTicketCommandRepo = Depends(
            Provide[Container.booking_ticket_command_repo]
        ),
        gift_ticket_repo: IGiftTicketCommandRepo = Depends(
            Provide[Container.gift_ticket_command_repo]
        ),
        validation_log_repo: IValidationLogRepo = Depends(Provide[Container.validation_log_repo]),
        policy_provider: IValidationPolicyProvider = Depends(
            Provide[Container.validation_policy_provider]
        ),
    ) -> Self:
        return cls(
            booking_ticket_repo=booking_ticket_repo,
            gift_ticket_repo=gift_ticket_repo,
            validation_log_repo=validation_log_repo,
            policy_provider=policy_provider,
        )

    @Logger.io
    async def execute(
        self,
        *,
        qr_code_data: str,
        caller: Caller,
        validation_date: Optional[CalendarDate] = None,
        context: Optional[ScanContext] = None,
    ) -> ValidationResult:
        with tracer.start_as_current_span(
            'use_case.validate_ticket',
            attributes={'caller.id': caller.identity, 'caller.role': str(caller.role)},
        ) as span:
            if not caller.identity:
                raise AuthenticationError('Authentication required')

            policy = await self.policy_provider.get_validation_policy()
            if policy.require_validator_role and not caller.can_validate:
                raise ForbiddenError('Insufficient permissions. Validator or admin role required.')

            payload = ScanPayload.parse(qr_code_data)
            if payload.is_raw_code and not policy.scanner_enabled:
                raise ForbiddenError('Scanner validation is disabled')
            if not payload.is_raw_code and not policy.qr_code_enabled:
                raise ForbiddenError('QR code validation is disabled')

            span.set_attribute('ticket.id', payload.ticket_id)
            span.set_attribute('scan.method', str(payload.scan_method))

            if is_gift_ticket_id(payload.ticket_id):
                result = await self._validate_gift_ticket(
                    payload=payload,
                    caller=caller,
                    policy=policy,
                    validation_date=validation_date,
                    context=context or ScanContext(),
                )
            else:
                result = await self._validate_booking_ticket(
                    payload=payload,
                    caller=caller,
                    policy=policy,
                    validation_date=validation_date,
                    context=context or ScanContext(),
                )

            outcome = 'validated' if result.success else str(result.error)
            span.set_attribute('validation.outcome', outcome)
            admission_metrics.record_validation(outcome=outcome)
            return result

    async def _validate_gift_ticket(
        self,
        *,
        payload: ScanPayload,
        caller: Caller,
        policy: ValidationPolicy,
        validation_date: Optional[CalendarDate],
        context: ScanContext,
    ) -> ValidationResult:
        gift = await self.gift_ticket_repo.get_by_ticket_id(ticket_id=payload.ticket_id)
        if not gift:
            raise NotFoundError('Gift ticket not found')
        gift.ensure_deliverable()

        subject = _AuditSubject(
            booking_id=gift.ticket_id,
            ticket_id=gift.ticket_id,
            event_id='gift-ticket',
            event_title=gift.event_title,
            user_id=gift.recipient_email,
            user_name=gift.customer_name,
            ticket_type=gift.ticket_type,
            ticket_quantity=1,
        )
        event = EventSummary(
            id='gift-ticket',
            title=gift.event_title,
            date=gift.event_date,
            time=gift.event_time,
            venue=gift.event_venue,
        )

        if validation_date and gift.event_date:
            event_day = CalendarDate.from_datetime(gift.event_date, self.calendar_tz)
            if event_day != validation_date:
                return await self._reject(
                    reason=RejectionReason.WRONG_DATE,
                    message=f'This ticket is valid for {event_day}, not {validation_date}',
                    subject=subject,
                    caller=caller,
                    payload=payload,
                    context=context,
                    ticket=self._gift_summary(gift),
                    event=event,
                    event_date=str(event_day),
                )

        if gift.is_validated:
            return await self._reject(
                reason=RejectionReason.ALREADY_VALIDATED,
                message=_already_validated_message(gift.validated_at, gift.validated_by),
                subject=subject,
                caller=caller,
                payload=payload,
                context=context,
                ticket=self._gift_summary(gift),
                event=event,
            )

        updated = await self.gift_ticket_repo.mark_validated(
            ticket_id=gift.ticket_id,
            validated_by=caller.identity,
            validated_at=datetime.now(timezone.utc),
        )
        if updated is None:
            winner = await self.gift_ticket_repo.get_by_ticket_id(ticket_id=gift.ticket_id) or gift
            return await self._reject_lost_race(
                at=winner.validated_at,
                by=winner.validated_by,
                policy=policy,
                subject=subject,
                caller=caller,
                payload=payload,
                context=context,
                ticket=self._gift_summary(winner),
                event=event,
            )

        await self._append_log(
            status=ValidationLogStatus.VALIDATED,
            notes='Gift ticket validated',
            subject=subject,
            caller=caller,
            payload=payload,
            context=context,
        )
        Logger.base.info(f'✅ [ADMISSION] Gift ticket {gift.ticket_id} validated by {caller.identity}')
        return ValidationResult(
            success=True,
            message='Gift ticket validated successfully',
            ticket=self._gift_summary(updated),
            event=event,
        )

    async def _resolve_booking(self, *, payload: ScanPayload) -> tuple[Booking, BookingTicket]:
        if payload.is_raw_code:
            booking = await self.booking_ticket_repo.find_by_ticket_code(code=payload.ticket_id)
            if not booking:
                raise NotFoundError('Ticket not found')
        else:
            payload.require_booking_fields()
            if payload.booking_id:
                booking = await self.booking_ticket_repo.get_by_id(booking_id=payload.booking_id)
            else:
                booking = await self.booking_ticket_repo.find_by_event_owner_ticket(
                    event_id=payload.event_id or '',
                    user_id=payload.user_id or '',
                    ticket_id=payload.ticket_id,
                )
            if not booking:
                raise NotFoundError('Booking not found')
            if booking.user_id != payload.user_id:
                raise InvalidOwnershipError()
            if booking.event_id != payload.event_id:
                raise InvalidOwnershipError('Event mismatch')

        if booking.status != BookingStatus.CONFIRMED:
            raise BookingNotConfirmedError(booking_status=str(booking.status))

        ticket = (
            booking.find_ticket_by_code(payload.ticket_id)
            if payload.is_raw_code
            else booking.find_ticket(payload.ticket_id)
        )
        if not ticket:
            raise NotFoundError('Ticket not found in booking')
        return booking, ticket

    async def _validate_booking_ticket(
        self,
        *,
        payload: ScanPayload,
        caller: Caller,
        policy: ValidationPolicy,
        validation_date: Optional[CalendarDate],
        context: ScanContext,
    ) -> ValidationResult:
        booking, ticket = await self._resolve_booking(payload=payload)

        subject = _AuditSubject(
            booking_id=booking.id,
            ticket_id=ticket.ticket_id,
            event_id=booking.event_id,
            event_title=booking.event.title,
            user_id=booking.user_id,
            user_name=booking.customer_name,
            ticket_type=ticket.ticket_name,
            ticket_quantity=len(booking.tickets),
        )
        event = EventSummary(
            id=booking.event.id,
            title=booking.event.title,
            date=booking.event.date,
            time=booking.event.time,
            venue=booking.event.venue,
        )
        booking_summary = BookingSummary(
            id=booking.id,
            booking_reference=booking.booking_reference,
            customer_name=booking.customer_name,
            ticket_count=len(booking.tickets),
        )

        async def reject(
            reason: RejectionReason, message: str, event_date: Optional[str] = None
        ) -> ValidationResult:
            return await self._reject(
                reason=reason,
                message=message,
                subject=subject,
                caller=caller,
                payload=payload,
                context=context,
                ticket=self._ticket_summary(ticket),
                event=event,
                booking=booking_summary,
                event_date=event_date,
            )

        if ticket.is_used:
            return await reject(
                RejectionReason.ALREADY_VALIDATED,
                _already_validated_message(ticket.used_at, ticket.validated_by),
            )

        now = datetime.now(timezone.utc)
        event_at = booking.event.date
        if event_at is not None:
            event_day = CalendarDate.from_datetime(event_at, self.calendar_tz)
            if validation_date and event_day != validation_date:
                return await reject(
                    RejectionReason.WRONG_DATE,
                    f'This ticket is valid for {event_day}, not {validation_date}',
                    event_date=str(event_day),
                )
            if not policy.within_time_window(event_at=event_at, now=now):
                return await reject(
                    RejectionReason.OUTSIDE_WINDOW,
                    f'Tickets can only be validated within {policy.describe_window()} '
                    f'of the event date ({event_day})',
                    event_date=str(event_day),
                )

        updated = await self.booking_ticket_repo.mark_ticket_used(
            booking_id=booking.id,
            ticket_id=ticket.ticket_id,
            validated_by=caller.identity,
            used_at=now,
        )
        if updated is None:
            latest = await self.booking_ticket_repo.get_by_id(booking_id=booking.id)
            winner = (latest.find_ticket(ticket.ticket_id) if latest else None) or ticket
            return await self._reject_lost_race(
                at=winner.used_at,
                by=winner.validated_by,
                policy=policy,
                subject=subject,
                caller=caller,
                payload=payload,
                context=context,
                ticket=self._ticket_summary(winner),
                event=event,
                booking=booking_summary,
            )

        await self._append_log(
            status=ValidationLogStatus.VALIDATED,
            notes='Ticket validated',
            subject=subject,
            caller=caller,
            payload=payload,
            context=context,
        )
        Logger.base.info(
            f'✅ [ADMISSION] Ticket {ticket.ticket_id} of booking {booking.id} '
            f'validated by {caller.identity}'
        )
        admitted = updated.find_ticket(ticket.ticket_id) or ticket
        return ValidationResult(
            success=True,
            message='Ticket validated successfully',
            ticket=self._ticket_summary(admitted),
            event=event,
            booking=booking_summary,
        )

    async def _reject(
        self,
        *,
        reason: RejectionReason,
        message: str,
        subject: _AuditSubject,
        caller: Caller,
        payload: ScanPayload,
        context: ScanContext,
        status: ValidationLogStatus = ValidationLogStatus.REJECTED,
        ticket: Optional[TicketSummary] = None,
        event: Optional[EventSummary] = None,
        booking: Optional[BookingSummary] = None,
        event_date: Optional[str] = None,
    ) -> ValidationResult:
        await self._append_log(
            status=status,
            notes=f'{reason}: {message}',
            subject=subject,
            caller=caller,
            payload=payload,
            context=context,
        )
        Logger.base.info(f'🚫 [ADMISSION] {subject.ticket_id} rejected ({reason}): {message}')
        return ValidationResult(
            success=False,
            message=message,
            error=reason,
            ticket=ticket,
            event=event,
            booking=booking,
            event_date=event_date,
        )

    async def _reject_lost_race(
        self,
        *,
        at: Optional[datetime],
        by: Optional[str],
        policy: ValidationPolicy,
        **kwargs,
    ) -> ValidationResult:
        status = (
            ValidationLogStatus.FLAGGED
            if policy.anti_replay_enabled
            else ValidationLogStatus.REJECTED
        )
        Logger.base.warning(
            f'⚠️ [ADMISSION] Concurrent scan of {kwargs["subject"].ticket_id} lost the admission race'
        )
        return await self._reject(
            reason=RejectionReason.ALREADY_VALIDATED,
            message=_already_validated_message(at, by),
            status=status,
            **kwargs,
        )

    async def _append_log(
        self,
        *,
        status: ValidationLogStatus,
        notes: str,
        subject: _AuditSubject,
        caller: Caller,
        payload: ScanPayload,
        context: ScanContext,
    ) -> None:
        entry = ValidationLogEntry.create(
            validator_id=caller.identity,
            validator_name=caller.display_name,
            booking_id=subject.booking_id,
            ticket_id=subject.ticket_id,
            event_id=subject.event_id,
            event_title=subject.event_title,
            user_id=subject.user_id,
            user_name=subject.user_name,
            status=status,
            notes=notes,
            validation_type=context.validation_type,
            location=context.location,
            device_info=DeviceInfo(user_agent=context.user_agent, ip=context.ip),
            scan_metadata=ScanMetadata(
                ticket_type=subject.ticket_type,
                ticket_quantity=subject.ticket_quantity,
                scan_method=payload.scan_method,
            ),
        )
        await self.validation_log_repo.append(entry=entry)

    @staticmethod
    def _ticket_summary(ticket: BookingTicket) -> TicketSummary:
        return TicketSummary(
            ticket_id=ticket.ticket_id,
            ticket_name=ticket.ticket_name,
            is_used=ticket.is_used,
            used_at=ticket.used_at,
            validated_by=ticket.validated_by,
        )

    @staticmethod
    def _gift_summary(gift: GiftTicket) -> TicketSummary:
        return TicketSummary(
            ticket_id=gift.ticket_id,
            ticket_name=gift.ticket_type or 'Gift ticket',
            is_used=gift.is_validated,
            used_at=gift.validated_at,
            validated_by=gift.validated_by,
            is_gift=True,
        )
