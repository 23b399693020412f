from datetime import datetime, timedelta, timezone

import pytest

from src.service.admission.domain.value_object.validation_policy import ValidationPolicy


NOW = datetime(2026, 6, 14, 18, 0, tzinfo=timezone.utc)


@pytest.mark.unit
class TestValidationPolicyTimeWindow:
    @pytest.mark.parametrize(
        ('offset', 'expected'),
        [
            (timedelta(hours=2), True),
            (timedelta(hours=-20), True),
            (timedelta(days=1), True),
            (timedelta(days=1, seconds=1), False),
            (timedelta(days=-3), False),
        ],
    )
    def test_one_day_window(self, offset: timedelta, expected: bool) -> None:
        policy = ValidationPolicy(scan_time_window_days=1)

        assert policy.within_time_window(event_at=NOW + offset, now=NOW) is expected

    def test_naive_event_time_is_utc(self) -> None:
        policy = ValidationPolicy(scan_time_window_days=1)
        naive = (NOW + timedelta(hours=3)).replace(tzinfo=None)

        assert policy.within_time_window(event_at=naive, now=NOW) is True

    def test_allow_anytime(self) -> None:
        policy = ValidationPolicy(allow_validation_anytime=True)

        assert policy.within_time_window(event_at=NOW + timedelta(days=365), now=NOW) is True

    @pytest.mark.parametrize(
        ('days', 'text'), [(1, '1 day'), (1.0, '1 day'), (2, '2 days'), (0.5, '0.5 days')]
    )
    def test_describe_window(self, days: float, text: str) -> None:
        assert ValidationPolicy(scan_time_window_days=days).describe_window() == text
