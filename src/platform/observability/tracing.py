"""
OpenTelemetry tracing

Spans come from module-level `trace.get_tracer(__name__)` in use cases and
controllers. Until `setup()` installs a provider the global no-op provider
answers, so unit tests pay nothing for them.

Exporters are chosen from settings:
- OTLP/gRPC when OTEL_EXPORTER_OTLP_ENDPOINT is set
- console when OTEL_CONSOLE_EXPORT is true
"""

from typing import Any, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import (
    DEPLOYMENT_ENVIRONMENT,
    SERVICE_NAME,
    SERVICE_VERSION,
    Resource,
)
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

from src.platform.config.core_setting import Settings, settings as default_settings


def current_trace_id() -> Optional[str]:
    """Hex trace id of the active span, if one is being recorded."""
    context = trace.get_current_span().get_span_context()
    return format(context.trace_id, '032x') if context.is_valid else None


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig(service_name='event-admission')
        tracing.setup()
        ...
        tracing.shutdown()
    """

    def __init__(self, *, service_name: str, settings: Settings = default_settings) -> None:
        self.service_name = service_name
        self.settings = settings
        self._provider: Optional[TracerProvider] = None

    def setup(self) -> None:
        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                SERVICE_VERSION: self.settings.VERSION,
                DEPLOYMENT_ENVIRONMENT: self.settings.DEPLOY_ENV,
            }
        )
        # Follow the caller's sampling decision; sample new roots by ratio
        sampler = ParentBased(TraceIdRatioBased(self.settings.OTEL_SAMPLE_RATIO))
        self._provider = TracerProvider(resource=resource, sampler=sampler)

        if self.settings.OTEL_EXPORTER_OTLP_ENDPOINT:
            self._provider.add_span_processor(
                BatchSpanProcessor(
                    OTLPSpanExporter(endpoint=self.settings.OTEL_EXPORTER_OTLP_ENDPOINT)
                )
            )
        if self.settings.OTEL_CONSOLE_EXPORT:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine hooks live on its sync engine
        SQLAlchemyInstrumentor().instrument(engine=getattr(engine, 'sync_engine', engine))

    def instrument_httpx(self) -> None:
        """Covers the bank gateway client, which is created lazily after startup."""
        HTTPXClientInstrumentor().instrument()

    def shutdown(self) -> None:
        if self._provider is not None:
            self._provider.force_flush()
            self._provider.shutdown()
