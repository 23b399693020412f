"""
Test Configuration and Fixtures

Environment setup runs before any application import, because settings and
the logging sinks are resolved at import time.

Architecture:
- Unit tests (test/**/unit/): in-memory fakes and AsyncMock, no infrastructure
- Shared builders and repository fakes live in test/service/test_helpers.py
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    os.environ['POSTGRES_DB'] = 'event_admission_test_db'
    os.environ['DEBUG'] = 'false'
    os.environ.setdefault('VALIDATION_CALENDAR_TZ', 'UTC')
    os.environ.setdefault('VALIDATION_POLICY_CACHE_TTL_SECONDS', '30')

    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)


_early_setup_test_environment()

from datetime import datetime, timedelta, timezone  # noqa: E402

import pytest  # noqa: E402

from src.service.shared_kernel.domain.value_object.caller import Caller, CallerRole  # noqa: E402


@pytest.fixture
def validator() -> Caller:
    return Caller(identity='val_3', role=CallerRole.VALIDATOR, name='Gate 3')


@pytest.fixture
def admin() -> Caller:
    return Caller(identity='adm_1', role=CallerRole.ADMIN, name='Ops')


@pytest.fixture
def plain_user() -> Caller:
    return Caller(identity='user_7', role=CallerRole.USER)


@pytest.fixture
def event_in_two_hours() -> datetime:
    return datetime.now(timezone.utc) + timedelta(hours=2)
