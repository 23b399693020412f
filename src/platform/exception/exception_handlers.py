"""
Error to HTTP response mapping

Every error body is `{"detail": ...}`. Client errors are already logged by
`@Logger.io` where they are raised; here only server-side failures are logged.
"""

from typing import Any, Callable, Coroutine

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from src.platform.exception.exceptions import CustomBaseError, GatewayError
from src.platform.logging.loguru_io import Logger

ExceptionHandler = Callable[[Request, Exception], Coroutine[Any, Any, Response]]


def _detail(status_code: int, detail: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': detail})


async def custom_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = exc if isinstance(exc, CustomBaseError) else CustomBaseError(str(exc))
    if isinstance(error, GatewayError):
        Logger.base.warning(f'🌐 [GATEWAY] {request.method} {request.url.path}: {error.message}')
    elif error.status_code >= 500:
        Logger.base.error(f'💥 [SERVER] {request.method} {request.url.path}: {error.message}')
    return _detail(error.status_code, error.message)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    # `ctx` may hold the raw exception object, which is not JSON serializable
    return _detail(
        status.HTTP_400_BAD_REQUEST,
        jsonable_encoder(errors, custom_encoder={Exception: str}),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    Logger.base.opt(exception=exc).error(
        f'💥 [UNHANDLED] {request.method} {request.url.path}: {type(exc).__name__}'
    )
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error')


EXCEPTION_HANDLERS: dict[type[Exception], ExceptionHandler] = {
    CustomBaseError: custom_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: unhandled_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
