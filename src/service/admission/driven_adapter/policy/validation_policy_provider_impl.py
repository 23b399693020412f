"""
Validation policy provider

Reads the single `validation_settings` row, caching the snapshot for a short
TTL so a busy gate does not hit the database on every scan. A missing row
yields the configured defaults; an unreadable row yields the defaults with the
time window pinned to one day.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

import attrs
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.config.core_setting import Settings, settings as default_settings
from src.platform.logging.loguru_io import Logger
from src.service.admission.app.interface.i_validation_policy_provider import (
    IValidationPolicyProvider,
)
from src.service.admission.domain.value_object.validation_policy import ValidationPolicy
from src.service.shared_kernel.driven_adapter.model.validation_settings_model import (
    ValidationSettingsModel,
)

SETTINGS_ROW_ID = 1
FALLBACK_WINDOW_DAYS = 1.0


class ValidationPolicyProviderImpl(IValidationPolicyProvider):
    def __init__(
        self,
        session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None,
        *,
        settings: Settings = default_settings,
    ):
        self.session_factory = session_factory
        self.settings = settings
        self.ttl_seconds = settings.VALIDATION_POLICY_CACHE_TTL_SECONDS
        self._cached: Optional[ValidationPolicy] = None
        self._expires_at = 0.0

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError('No session_factory available')
        async with self.session_factory() as session:
            yield session

    @staticmethod
    def _to_policy(row: ValidationSettingsModel) -> ValidationPolicy:
        return ValidationPolicy(
            qr_code_enabled=row.qr_code_enabled,
            scanner_enabled=row.scanner_enabled,
            require_validator_role=row.require_validator_role,
            scan_time_window_days=row.scan_time_window_days,
            allow_validation_anytime=row.allow_validation_anytime,
            anti_replay_enabled=row.anti_replay_enabled,
        )

    async def _load(self) -> ValidationPolicy:
        try:
            async with self._get_session() as session:
                row = await session.get(ValidationSettingsModel, SETTINGS_ROW_ID)
        except (SQLAlchemyError, OSError, RuntimeError) as e:
            Logger.base.warning(f'⚠️ [POLICY] Settings unavailable, using 1-day fallback: {e}')
            return attrs.evolve(
                ValidationPolicy.from_settings(self.settings),
                scan_time_window_days=FALLBACK_WINDOW_DAYS,
            )
        if row is None:
            return ValidationPolicy.from_settings(self.settings)
        return self._to_policy(row)

    async def get_validation_policy(self) -> ValidationPolicy:
        now = time.monotonic()
        if self._cached is not None and now < self._expires_at:
            return self._cached
        self._cached = await self._load()
        self._expires_at = now + self.ttl_seconds
        return self._cached
