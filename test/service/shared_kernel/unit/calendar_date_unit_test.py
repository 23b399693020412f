from datetime import datetime, timezone

import pytest

from src.platform.exception.exceptions import DomainError
from src.service.shared_kernel.domain.value_object.calendar_date import CalendarDate


@pytest.mark.unit
class TestCalendarDate:
    def test_parse_date_and_timestamp(self) -> None:
        assert CalendarDate.parse('2026-06-14') == CalendarDate(2026, 6, 14)
        assert CalendarDate.parse('2026-06-14T23:30:00Z') == CalendarDate(2026, 6, 14)

    @pytest.mark.parametrize('text', ['14/06/2026', '2026-02-30', 'tomorrow', ''])
    def test_parse_rejects_invalid_dates(self, text: str) -> None:
        with pytest.raises(DomainError):
            CalendarDate.parse(text)

    def test_invalid_components_are_rejected(self) -> None:
        with pytest.raises(DomainError):
            CalendarDate(2026, 13, 1)

    def test_str_is_iso(self) -> None:
        assert str(CalendarDate(2026, 1, 5)) == '2026-01-05'

    def test_from_datetime_depends_on_timezone(self) -> None:
        """
        Given an event at 23:30 UTC
        When it is projected onto the calendar in UTC and in Europe/Zagreb
        Then the two calendars disagree on the day
        """
        instant = datetime(2026, 6, 14, 23, 30, tzinfo=timezone.utc)

        assert CalendarDate.from_datetime(instant, 'UTC') == CalendarDate(2026, 6, 14)
        assert CalendarDate.from_datetime(instant, 'Europe/Zagreb') == CalendarDate(2026, 6, 15)

    def test_naive_datetime_is_treated_as_utc(self) -> None:
        naive = datetime(2026, 6, 14, 23, 30)

        assert CalendarDate.from_datetime(naive, 'Europe/Zagreb') == CalendarDate(2026, 6, 15)

    def test_ordering(self) -> None:
        assert CalendarDate(2026, 6, 14) < CalendarDate(2026, 6, 15)
