"""
OTLP exporters for traces, metrics, and logs.

Factory functions for OTLP exporters over HTTP (default) or gRPC. HTTP endpoints
get the per-signal path (/v1/traces, /v1/metrics, /v1/logs) appended; gRPC
endpoints drop the URL scheme.
"""

from typing import Any

from opentelemetry.sdk._logs.export import LogRecordExporter
from opentelemetry.sdk.metrics.export import MetricExporter
from opentelemetry.sdk.trace.export import SpanExporter

from .exporter_set import ExporterSet

PROTOCOLS = ("http", "grpc")


def _grpc_endpoint(endpoint: str) -> str:
    return endpoint.replace("http://", "").replace("https://", "")


def _http_endpoint(endpoint: str, signal: str) -> str:
    path = f"/v1/{signal}"
    base = endpoint.rstrip("/")
    return base if base.endswith(path) else f"{base}{path}"


def _check_protocol(protocol: str) -> None:
    if protocol not in PROTOCOLS:
        raise ValueError(f"Unsupported OTLP protocol {protocol!r}; expected one of {PROTOCOLS}")


def create_otlp_trace_exporter(
    endpoint: str = "http://localhost:4318",
    protocol: str = "http",
    headers: dict[str, str] | None = None,
    **kwargs: Any,
) -> SpanExporter:
    """
    Create an OTLP trace exporter.

    Args:
        endpoint: OTLP endpoint URL
        protocol: "http" or "grpc"
        headers: Optional headers to include
        **kwargs: Additional exporter configuration
    """
    _check_protocol(protocol)
    if protocol == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        return OTLPSpanExporter(endpoint=_grpc_endpoint(endpoint), headers=headers, **kwargs)

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (  # type: ignore[assignment]
        OTLPSpanExporter,
    )

    return OTLPSpanExporter(endpoint=_http_endpoint(endpoint, "traces"), headers=headers, **kwargs)


def create_otlp_metric_exporter(
    endpoint: str = "http://localhost:4318",
    protocol: str = "http",
    headers: dict[str, str] | None = None,
    **kwargs: Any,
) -> MetricExporter:
    """Create an OTLP metric exporter (same arguments as create_otlp_trace_exporter)."""
    _check_protocol(protocol)
    if protocol == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter

        return OTLPMetricExporter(endpoint=_grpc_endpoint(endpoint), headers=headers, **kwargs)

    from opentelemetry.exporter.otlp.proto.http.metric_exporter import (  # type: ignore[assignment]
        OTLPMetricExporter,
    )

    return OTLPMetricExporter(
        endpoint=_http_endpoint(endpoint, "metrics"), headers=headers, **kwargs
    )


def create_otlp_log_exporter(
    endpoint: str = "http://localhost:4318",
    protocol: str = "http",
    headers: dict[str, str] | None = None,
    **kwargs: Any,
) -> LogRecordExporter:
    """Create an OTLP log exporter (same arguments as create_otlp_trace_exporter)."""
    _check_protocol(protocol)
    if protocol == "grpc":
        from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter

        return OTLPLogExporter(endpoint=_grpc_endpoint(endpoint), headers=headers, **kwargs)

    from opentelemetry.exporter.otlp.proto.http._log_exporter import (  # type: ignore[assignment]
        OTLPLogExporter,
    )

    return OTLPLogExporter(endpoint=_http_endpoint(endpoint, "logs"), headers=headers, **kwargs)


def create_otlp_exporters(
    endpoint: str = "http://localhost:4318",
    protocol: str = "http",
    metrics: bool = True,
    logs: bool = True,
    headers: dict[str, str] | None = None,
) -> ExporterSet:
    """OTLP exporters for the enabled signals, all pointed at the same collector."""
    return ExporterSet(
        create_otlp_trace_exporter(endpoint, protocol, headers),
        create_otlp_metric_exporter(endpoint, protocol, headers) if metrics else None,
        create_otlp_log_exporter(endpoint, protocol, headers) if logs else None,
    )
