import pytest

from src.service.admission.domain.entity.validation_log_entry import ValidationLogEntry
from src.service.admission.domain.enum.validation_enum import ValidationLogStatus


def _create(**overrides):
    fields = dict(
        validator_id='val_3',
        validator_name='Gate 3',
        booking_id='bk_01',
        ticket_id='TKT-1',
        event_id='evt_42',
        event_title='Summer Gala',
        user_id='user_7',
        user_name='Ana',
        status=ValidationLogStatus.VALIDATED,
    )
    fields.update(overrides)
    return ValidationLogEntry.create(**fields)


@pytest.mark.unit
class TestValidationLogEntry:
    def test_entries_get_distinct_ids(self) -> None:
        assert _create().id != _create().id

    def test_notes_and_location_are_truncated(self) -> None:
        entry = _create(notes='n' * 1500, location='l' * 300)

        assert len(entry.notes) == 1000
        assert entry.location is not None and len(entry.location) == 200
