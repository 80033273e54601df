"""TelemetryConfig construction and the disabled path (no global provider is installed)."""

import pytest
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace.export import ConsoleSpanExporter

from app.core.config import Settings
from app.shared.telemetry.telemetry import TelemetryConfig


def test_from_settings_copies_fields() -> None:
    settings = Settings(
        _env_file=None,
        telemetry_exporter="none",
        telemetry_sample_rate=0.25,
        telemetry_environment="staging",
    )
    telemetry = TelemetryConfig.from_settings(settings)
    assert telemetry.service_name == "bizdesk-access"
    assert telemetry.enabled is False
    assert telemetry.exporter == "none"
    assert telemetry.sample_rate == 0.25
    assert telemetry.environment == "staging"


def test_disabled_start_is_a_no_op() -> None:
    telemetry = TelemetryConfig("svc", "1.0", enabled=False)
    assert telemetry.start() is False
    assert telemetry.active is False
    telemetry.shutdown()


def test_unknown_exporter_rejected() -> None:
    with pytest.raises(ValueError):
        TelemetryConfig("svc", "1.0", exporter="zipkin")


@pytest.mark.parametrize(
    "exporter, endpoint, expected",
    [
        ("none", None, type(None)),
        ("console", None, ConsoleSpanExporter),
        ("otlp", None, ConsoleSpanExporter),
        ("otlp", "http://localhost:4317", OTLPSpanExporter),
    ],
)
def test_build_exporter(exporter: str, endpoint: str | None, expected: type) -> None:
    telemetry = TelemetryConfig("svc", "1.0", exporter=exporter, otlp_endpoint=endpoint)
    assert isinstance(telemetry.build_exporter(), expected)
