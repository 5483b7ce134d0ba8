"""
SDK provider wiring for the three signals.

TelemetryPipeline turns an ExporterSet into a TracerProvider, LoggerProvider and
MeterProvider sharing one Resource. Batch processors and a periodic metric
reader are used by default; batch=False switches to the simple (synchronous)
processors, and metric_reader lets callers supply their own reader (e.g. an
InMemoryMetricReader).
"""

import logging

from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, SimpleLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor

from .config import DEFAULT_SERVICE_NAME, resource_attributes, resource_schema_url
from .exporters.exporter_set import ExporterSet

logger = logging.getLogger(__name__)


def build_resource(service_name: str = DEFAULT_SERVICE_NAME) -> Resource:
    """Resource from config/resource.yaml plus service.name."""
    return Resource.create(resource_attributes(service_name), schema_url=resource_schema_url())


class TelemetryPipeline:
    """Owns the SDK providers; shutdown() flushes and closes all of them."""

    def __init__(
        self,
        exporters: ExporterSet,
        resource: Resource | None = None,
        batch: bool = True,
        metric_reader: MetricReader | None = None,
        export_interval_ms: int = 5000,
    ):
        self.resource = resource or build_resource()

        self.tracer_provider = TracerProvider(resource=self.resource)
        span_processor = BatchSpanProcessor if batch else SimpleSpanProcessor
        self.tracer_provider.add_span_processor(span_processor(exporters.trace))

        self.logger_provider = LoggerProvider(resource=self.resource)
        if exporters.log is not None:
            log_processor = BatchLogRecordProcessor if batch else SimpleLogRecordProcessor
            self.logger_provider.add_log_record_processor(log_processor(exporters.log))

        readers: list[MetricReader] = []
        if metric_reader is not None:
            readers.append(metric_reader)
        if exporters.metric is not None:
            readers.append(
                PeriodicExportingMetricReader(
                    exporters.metric,
                    export_interval_millis=export_interval_ms,
                )
            )
        self.meter_provider = MeterProvider(resource=self.resource, metric_readers=readers)

    def install_global(self) -> None:
        """Register the providers as the process-wide OTEL providers (for in-process agents)."""
        trace.set_tracer_provider(self.tracer_provider)
        set_logger_provider(self.logger_provider)
        metrics.set_meter_provider(self.meter_provider)

    def shutdown(self) -> None:
        """Flush every provider before shutting any of them down."""
        for provider in (self.tracer_provider, self.logger_provider, self.meter_provider):
            try:
                provider.force_flush(5000)
            except Exception:
                logger.warning("force_flush failed for %s", type(provider).__name__, exc_info=True)
        self.tracer_provider.shutdown()
        self.logger_provider.shutdown()
        self.meter_provider.shutdown()
