"""
Production FastAPI Application

Admission (ticket validation) and payment reconciliation in one process.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import cleanup, container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import (
    create_db_and_tables,
    engine_manager,
    get_engine,
)
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Admission Service] Starting up...')

    tracing = TracingConfig(service_name='event-admission')
    tracing.setup()
    Logger.base.info('📊 [Admission Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Admission Service] Dependency injection wired')

    await create_db_and_tables()
    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('🗄️  [Admission Service] Database engine ready + instrumented')

    tracing.instrument_httpx()
    Logger.base.info('🌐 [Admission Service] Gateway client instrumentation configured')

    Logger.base.info('✅ [Admission Service] Ready to serve requests')

    yield

    Logger.base.info('🛑 [Admission Service] Shutting down...')

    # Close the gateway HTTP client before the engine goes away
    await cleanup()
    await engine_manager.dispose()
    Logger.base.info('🗄️  [Admission Service] Gateway client and database engine closed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Admission Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
