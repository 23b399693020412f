from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

import attrs
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_validation_log_repo import IValidationLogRepo
from src.service.admission.domain.entity.validation_log_entry import ValidationLogEntry
from src.service.shared_kernel.driven_adapter.model.validation_log_model import (
    ValidationLogModel,
)


class ValidationLogRepoImpl(IValidationLogRepo):
    """Insert-only audit sink"""

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
    def _to_model(entry: ValidationLogEntry) -> ValidationLogModel:
        return ValidationLogModel(
            id=entry.id,
            validator_id=entry.validator_id,
            validator_name=entry.validator_name,
            booking_id=entry.booking_id,
            ticket_id=entry.ticket_id,
            event_id=entry.event_id,
            event_title=entry.event_title,
            user_id=entry.user_id,
            user_name=entry.user_name,
            validation_type=entry.validation_type.value,
            status=entry.status.value,
            notes=entry.notes,
            location=entry.location,
            device_info=attrs.asdict(entry.device_info),
            scan_metadata=attrs.asdict(entry.scan_metadata, value_serializer=_enum_value),
            created_at=entry.created_at,
        )

    @Logger.io
    async def append(self, *, entry: ValidationLogEntry) -> None:
        async with self._get_session() as session:
            session.add(self._to_model(entry))
            await session.commit()


def _enum_value(_inst, _field, value):
    return getattr(value, 'value', value)
