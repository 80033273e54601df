"""OpenTelemetry setup for the access service.

Spans come from two places: FastAPIInstrumentor for bridge requests, and the
traced decorator on RoleProfileLoader.load, LabelCatalog.enrich and the
BackendGateway fetches. Exporters: console, OTLP gRPC, or none.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

EXPORTERS = ("console", "otlp", "none")
# Comma-separated paths FastAPIInstrumentor does not trace.
DEFAULT_EXCLUDED_URLS = "/api/v1/health"


class TelemetryConfig:
    """Tracer provider lifecycle for one process.

    start() is a no-op when disabled; a failure while starting is logged and
    leaves the service running untraced.
    """

    def __init__(
        self,
        service_name: str,
        service_version: str,
        *,
        enabled: bool = True,
        environment: str = "development",
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
        excluded_urls: str = DEFAULT_EXCLUDED_URLS,
    ) -> None:
        if exporter not in EXPORTERS:
            raise ValueError(f"exporter must be one of {EXPORTERS}, got: {exporter!r}")
        self.service_name = service_name
        self.service_version = service_version
        self.enabled = enabled
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.excluded_urls = excluded_urls
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: "Settings") -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=settings.telemetry_enabled,
            environment=settings.telemetry_environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    @property
    def active(self) -> bool:
        return self.enabled and self.tracer_provider is not None

    def build_exporter(self) -> SpanExporter | None:
        """Exporter for the configured kind; OTLP without an endpoint falls back to console."""
        if self.exporter == "none":
            return None
        if self.exporter == "otlp":
            if self.otlp_endpoint:
                return OTLPSpanExporter(
                    endpoint=self.otlp_endpoint,
                    insecure=self.otlp_endpoint.startswith("http://"),
                )
            logger.warning("OTLP exporter selected without an endpoint; using console")
        return ConsoleSpanExporter()

    def start(self, app: FastAPI | None = None) -> bool:
        """Install the global tracer provider and instrument app and logging.

        Returns:
            True when tracing is active afterwards.
        """
        if not self.enabled:
            logger.info("Telemetry disabled")
            return False
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=ParentBased(TraceIdRatioBased(self.sample_rate)),
            )
            exporter = self.build_exporter()
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
            self.tracer_provider = provider
            if app is not None:
                FastAPIInstrumentor.instrument_app(
                    app, tracer_provider=provider, excluded_urls=self.excluded_urls
                )
            LoggingInstrumentor().instrument(tracer_provider=provider, set_logging_format=True)
        except Exception:
            logger.exception("Telemetry start failed; continuing without tracing")
            return False
        logger.info(
            "Telemetry started: service=%s exporter=%s sample_rate=%s",
            self.service_name,
            self.exporter,
            self.sample_rate,
        )
        return True

    def shutdown(self) -> None:
        """Flush pending spans and release the provider."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Telemetry shutdown failed")
        finally:
            self.tracer_provider = None


_telemetry: TelemetryConfig | None = None


def get_telemetry() -> TelemetryConfig | None:
    """Process-wide telemetry set by the lifespan, if any."""
    return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    _telemetry = telemetry
