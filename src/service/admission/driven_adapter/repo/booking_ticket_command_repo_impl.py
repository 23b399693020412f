from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncContextManager, AsyncIterator, Callable

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import func

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_booking_ticket_command_repo import (
    IBookingTicketCommandRepo,
)
from src.service.shared_kernel.domain.entity.booking_entity import Booking
from src.service.shared_kernel.driven_adapter.booking_mapper import to_booking_entity
from src.service.shared_kernel.driven_adapter.model.booking_model import (
    BookingModel,
    BookingTicketModel,
)


class BookingTicketCommandRepoImpl(IBookingTicketCommandRepo):
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

    @Logger.io
    async def get_by_id(self, *, booking_id: str) -> Booking | None:
        async with self._get_session() as session:
            db_booking = await session.get(BookingModel, booking_id)
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def find_by_event_owner_ticket(
        self, *, event_id: str, user_id: str, ticket_id: str
    ) -> Booking | None:
        stmt = (
            select(BookingModel)
            .join(BookingTicketModel, BookingTicketModel.booking_id == BookingModel.id)
            .where(
                BookingModel.event_id == event_id,
                BookingModel.user_id == user_id,
                BookingTicketModel.ticket_id == ticket_id,
            )
            .limit(1)
        )
        async with self._get_session() as session:
            db_booking = (await session.execute(stmt)).scalars().first()
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def find_by_ticket_code(self, *, code: str) -> Booking | None:
        stmt = (
            select(BookingModel)
            .join(BookingTicketModel, BookingTicketModel.booking_id == BookingModel.id)
            .where(or_(BookingTicketModel.ticket_id == code, BookingTicketModel.qr_code == code))
            .limit(1)
        )
        async with self._get_session() as session:
            db_booking = (await session.execute(stmt)).scalars().first()
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def mark_ticket_used(
        self, *, booking_id: str, ticket_id: str, validated_by: str, used_at: datetime
    ) -> Booking | None:
        # Compare-and-swap on is_used: concurrent scans of one ticket match at most one row
        stmt = (
            update(BookingTicketModel)
            .where(
                BookingTicketModel.booking_id == booking_id,
                BookingTicketModel.ticket_id == ticket_id,
                BookingTicketModel.is_used.is_(False),
            )
            .values(is_used=True, used_at=used_at, validated_by=validated_by)
            .returning(BookingTicketModel.id)
            .execution_options(synchronize_session=False)
        )
        async with self._get_session() as session:
            if (await session.execute(stmt)).scalar_one_or_none() is None:
                await session.rollback()
                return None
            await session.execute(
                update(BookingModel)
                .where(BookingModel.id == booking_id)
                .values(updated_at=func.now())
                .execution_options(synchronize_session=False)
            )
            await session.commit()

        return await self.get_by_id(booking_id=booking_id)
