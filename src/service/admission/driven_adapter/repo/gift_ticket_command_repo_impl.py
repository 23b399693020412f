from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_gift_ticket_command_repo import IGiftTicketCommandRepo
from src.service.admission.domain.entity.gift_ticket_entity import GiftTicket
from src.service.admission.domain.enum.validation_enum import GiftTicketStatus
from src.service.shared_kernel.driven_adapter.model.gift_ticket_model import GiftTicketModel


class GiftTicketCommandRepoImpl(IGiftTicketCommandRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ):
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError('No session_factory available')
        async with self.session_factory() as session:
            yield session

    @staticmethod
    def _to_entity(db_gift: GiftTicketModel) -> GiftTicket:
        return GiftTicket(
            ticket_id=db_gift.ticket_id,
            recipient_email=db_gift.recipient_email,
            status=GiftTicketStatus(db_gift.status),
            customer_name=db_gift.customer_name,
            ticket_type=db_gift.ticket_type,
            price=Decimal(db_gift.price or 0),
            currency=db_gift.currency,
            booking_reference=db_gift.booking_reference,
            event_title=db_gift.event_title,
            event_date=db_gift.event_date,
            event_time=db_gift.event_time,
            event_venue=db_gift.event_venue,
            is_validated=db_gift.is_validated,
            validated_at=db_gift.validated_at,
            validated_by=db_gift.validated_by,
            sent_at=db_gift.sent_at,
        )

    @Logger.io
    async def get_by_ticket_id(self, *, ticket_id: str) -> GiftTicket | None:
        async with self._get_session() as session:
            db_gift = await session.get(GiftTicketModel, ticket_id)
            return self._to_entity(db_gift) if db_gift else None

    @Logger.io
    async def mark_validated(
        self, *, ticket_id: str, validated_by: str, validated_at: datetime
    ) -> GiftTicket | None:
        stmt = (
            update(GiftTicketModel)
            .where(
                GiftTicketModel.ticket_id == ticket_id,
                GiftTicketModel.status == GiftTicketStatus.SENT.value,
                GiftTicketModel.is_validated.is_(False),
            )
            .values(is_validated=True, validated_at=validated_at, validated_by=validated_by)
            .returning(GiftTicketModel)
            .execution_options(synchronize_session=False)
        )
        async with self._get_session() as session:
            db_gift = (await session.execute(stmt)).scalar_one_or_none()
            if db_gift is None:
                await session.rollback()
                return None
            gift = self._to_entity(db_gift)
            await session.commit()
            return gift
