from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reconciliation.app.interface.i_reconciliation_booking_repo import (
    IReconciliationBookingRepo,
)
from src.service.shared_kernel.domain.entity.booking_entity import Booking
from src.service.shared_kernel.domain.enum.booking_status import BookingStatus
from src.service.shared_kernel.driven_adapter.booking_mapper import to_booking_entity
from src.service.shared_kernel.driven_adapter.model.booking_model import BookingModel


def _escape_like(value: str) -> str:
    return value.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')


class ReconciliationBookingRepoImpl(IReconciliationBookingRepo):
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
    async def get_by_gateway_order_id(self, *, order_id: str) -> Booking | None:
        stmt = select(BookingModel).where(BookingModel.gateway_order_id == order_id).limit(1)
        async with self._get_session() as session:
            db_booking = (await session.execute(stmt)).scalars().first()
            return to_booking_entity(db_booking) if db_booking else None

    @Logger.io
    async def search_by_customer_name(self, *, name: str, limit: int) -> List[Booking]:
        stmt = (
            select(BookingModel)
            .where(
                BookingModel.customer_name.ilike(f'%{_escape_like(name)}%', escape='\\'),
                BookingModel.gateway_order_id.is_not(None),
                BookingModel.gateway_order_id != '',
            )
            .order_by(BookingModel.created_at.desc())
            .limit(limit)
        )
        async with self._get_session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_booking_entity(row) for row in rows]

    @Logger.io
    async def list_pending_with_gateway_order(self, *, limit: int) -> List[Booking]:
        stmt = (
            select(BookingModel)
            .where(
                BookingModel.status == BookingStatus.PENDING.value,
                BookingModel.gateway_order_id.is_not(None),
                BookingModel.gateway_order_id != '',
            )
            .order_by(BookingModel.created_at.desc())
            .limit(limit)
        )
        async with self._get_session() as session:
            rows = (await session.execute(stmt)).scalars().all()
            return [to_booking_entity(row) for row in rows]

    @Logger.io
    async def save_payment_state(self, *, booking: Booking) -> Booking:
        booking.ensure_payment_consistent()
        stmt = (
            update(BookingModel)
            .where(BookingModel.id == booking.id)
            .values(
                status=booking.status.value,
                payment_status=booking.payment_status.value,
                payment_date=booking.payment_date,
                confirmed_at=booking.confirmed_at,
                email_sent=booking.email_sent,
            )
            .returning(BookingModel.id)
            .execution_options(synchronize_session=False)
        )
        async with self._get_session() as session:
            if (await session.execute(stmt)).scalar_one_or_none() is None:
                await session.rollback()
                raise NotFoundError('Booking not found')
            await session.commit()

        saved = await self.get_by_id(booking_id=booking.id)
        if saved is None:
            raise NotFoundError('Booking not found')
        return saved
