"""
Calendar Date Value Object

A day on the calendar, independent of any instant. Two timestamps fall on the
same CalendarDate only relative to a timezone, which callers choose explicitly
(see `VALIDATION_CALENDAR_TZ`).
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import attrs

from src.platform.exception.exceptions import DomainError


@attrs.define(frozen=True, order=True)
class CalendarDate:
    year: int
    month: int
    day: int

    def __attrs_post_init__(self) -> None:
        try:
            date(self.year, self.month, self.day)
        except ValueError as e:
            raise DomainError(f'Invalid calendar date: {e}')

    @classmethod
    def from_datetime(cls, value: datetime, tz: ZoneInfo | str = 'UTC') -> 'CalendarDate':
        zone = ZoneInfo(tz) if isinstance(tz, str) else tz
        # Naive timestamps are stored in UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        local = value.astimezone(zone)
        return cls(year=local.year, month=local.month, day=local.day)

    @classmethod
    def parse(cls, text: str) -> 'CalendarDate':
        """Accept `YYYY-MM-DD`; a full ISO timestamp is truncated to its date part."""
        try:
            parsed = date.fromisoformat(text.strip()[:10])
        except (ValueError, AttributeError):
            raise DomainError(f'Invalid validation date: {text!r}. Expected YYYY-MM-DD')
        return cls(year=parsed.year, month=parsed.month, day=parsed.day)

    def __str__(self) -> str:
        return f'{self.year:04d}-{self.month:02d}-{self.day:02d}'
