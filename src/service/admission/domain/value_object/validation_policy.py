from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import attrs


if TYPE_CHECKING:
    from src.platform.config.core_setting import Settings


@attrs.define(frozen=True)
class ValidationPolicy:
    """Snapshot of the admission settings, read once per validation call"""

    qr_code_enabled: bool = True
    scanner_enabled: bool = True
    require_validator_role: bool = True
    scan_time_window_days: float = 1.0
    allow_validation_anytime: bool = False
    anti_replay_enabled: bool = True

    @classmethod
    def from_settings(cls, settings: 'Settings') -> 'ValidationPolicy':
        return cls(
            qr_code_enabled=settings.VALIDATION_QR_CODE_ENABLED,
            scanner_enabled=settings.VALIDATION_SCANNER_ENABLED,
            require_validator_role=settings.VALIDATION_REQUIRE_VALIDATOR_ROLE,
            scan_time_window_days=settings.VALIDATION_SCAN_TIME_WINDOW_DAYS,
            allow_validation_anytime=settings.VALIDATION_ALLOW_ANYTIME,
            anti_replay_enabled=settings.VALIDATION_ANTI_REPLAY_ENABLED,
        )

    def within_time_window(self, *, event_at: datetime, now: datetime) -> bool:
        if self.allow_validation_anytime:
            return True
        if event_at.tzinfo is None:
            event_at = event_at.replace(tzinfo=timezone.utc)
        return abs(event_at - now) <= timedelta(days=self.scan_time_window_days)

    def describe_window(self) -> str:
        days = self.scan_time_window_days
        shown = int(days) if float(days).is_integer() else days
        return f'{shown} day' if shown == 1 else f'{shown} days'
