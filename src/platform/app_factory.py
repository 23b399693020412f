"""
FastAPI application assembly

`main.py` passes the production lifespan; tests pass a no-op one and override
the use case dependencies.
"""

from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from uuid_utils import uuid7

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.logging.loguru_io_config import request_id_var
from src.platform.observability.tracing import TracingConfig
from src.service.admission.driving_adapter.http_controller.validation_controller import (
    router as validation_router,
)
from src.service.reconciliation.driving_adapter.http_controller.reconciliation_controller import (
    router as reconciliation_router,
)


async def bind_request_id(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Reuse the proxy's request id or mint one, and tag every log line of the request with it."""
    header = settings.REQUEST_ID_HEADER
    request_id = request.headers.get(header) or str(uuid7())
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers[header] = request_id
    return response


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Event admission and payment reconciliation',
    service_name: str = 'event-admission',
) -> FastAPI:
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Instrumentation wraps the middleware stack, so it goes first
    TracingConfig(service_name=service_name).instrument_fastapi(app=app)

    app.middleware('http')(bind_request_id)
    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
        expose_headers=[settings.REQUEST_ID_HEADER],
    )
    register_exception_handlers(app)

    app.include_router(validation_router, prefix='/api/validate', tags=['admission'])
    app.include_router(
        reconciliation_router, prefix='/api/admin/reconcile', tags=['reconciliation']
    )

    @app.get('/health', tags=['ops'])
    async def health() -> dict[str, str]:
        return {'status': 'healthy', 'service': service_name}

    @app.get('/metrics', tags=['ops'])
    async def metrics() -> PlainTextResponse:
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
