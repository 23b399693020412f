"""
Loguru sinks and shared logging state

Every line carries the service context and the id of the HTTP request it
belongs to, so all log lines of one scan or one reconciliation can be
grepped together.
"""

from contextvars import ContextVar
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger, Record

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)

# Argument names whose values never reach a log line
SENSITIVE_KEYWORDS = frozenset({'password', 'secret', 'token', 'authorization'})
MAX_CONTENT_LENGTH = 2000
NO_REQUEST = '-'

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)
request_id_var: ContextVar[str] = ContextVar('request_id_var', default=NO_REQUEST)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    REQUEST_ID = 'request_id'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _inject_request_id(record: 'Record') -> None:
    record['extra'][ExtraField.REQUEST_ID] = request_id_var.get()


def _access_log_level(message: str) -> str | None:
    """
    Map a uvicorn access log line to a log level by its HTTP status.

    Format: '127.0.0.1:51234 - "POST /api/validate HTTP/1.1" 400'
    Soft rejections answer 400, so 4xx is a warning rather than an error.
    """
    if ' HTTP/' not in message or '"' not in message:
        return None
    try:
        status_code = int(message.rsplit('"', 1)[1].split()[0])
    except (ValueError, IndexError):
        return None

    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'WARNING'
    return 'INFO'


class InterceptHandler(logging.Handler):
    """Route stdlib logging (uvicorn, sqlalchemy, httpx) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()
        if record.levelno <= logging.DEBUG and 'Using selector:' in message:
            return

        level = _access_log_level(message) if record.name == 'uvicorn.access' else None
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, message)


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        f'<m>{{extra[{ExtraField.REQUEST_ID}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
    )
)


loguru_logger.remove()
loguru_logger.configure(patcher=_inject_request_id)
custom_logger: 'LoguruLogger' = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

# Production logs to stdout only
if settings.DEBUG:
    log_prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    custom_logger.add(
        f'{LOG_DIR}/{log_prefix}{{time:YYYY-MM-DD_HH}}.log',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
