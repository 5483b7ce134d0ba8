"""
File-based exporters for offline inspection.

Each exporter writes one JSON object per line (JSONL) for every span, metric
or log record it receives, so a generator run can be checked without a backend.
"""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from opentelemetry.sdk._logs.export import LogExportResult, LogRecordExporter
from opentelemetry.sdk.metrics.export import MetricExporter, MetricExportResult, MetricsData
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

from .exporter_set import ExporterSet


def _hex_id(value: int | None, width: int) -> str | None:
    return format(value, f"0{width}x") if value else None


class _JsonLinesFile:
    """Append-only JSONL sink shared by the exporters below."""

    def __init__(self, output_path: str | Path, append: bool = True):
        self.output_path = Path(output_path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        if not append and self.output_path.exists():
            self.output_path.unlink()

    def write(self, rows: Iterable[dict[str, Any]]) -> None:
        with open(self.output_path, "a", encoding="utf-8") as f:
            for row in rows:
                f.write(json.dumps(row, default=str) + "\n")


def span_to_dict(span: ReadableSpan) -> dict[str, Any]:
    """Serialize a finished span, including its events and links."""
    return {
        "name": span.name,
        "trace_id": _hex_id(span.context.trace_id, 32),
        "span_id": _hex_id(span.context.span_id, 16),
        "parent_span_id": _hex_id(span.parent.span_id, 16) if span.parent else None,
        "kind": span.kind.name if span.kind else "INTERNAL",
        "start_time": span.start_time,
        "end_time": span.end_time,
        "status": {
            "status_code": span.status.status_code.name,
            "description": span.status.description,
        },
        "attributes": dict(span.attributes) if span.attributes else {},
        "events": [
            {
                "name": event.name,
                "timestamp": event.timestamp,
                "attributes": dict(event.attributes) if event.attributes else {},
            }
            for event in span.events
        ],
        "links": [
            {
                "trace_id": _hex_id(link.context.trace_id, 32),
                "span_id": _hex_id(link.context.span_id, 16),
                "attributes": dict(link.attributes) if link.attributes else {},
            }
            for link in span.links
        ],
        "resource": dict(span.resource.attributes) if span.resource else {},
    }


class FileSpanExporter(SpanExporter):
    """Export spans to a JSONL file."""

    def __init__(self, output_path: str | Path, append: bool = True):
        self._file = _JsonLinesFile(output_path, append)
        self.output_path = self._file.output_path

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        """Export spans to file."""
        try:
            self._file.write(span_to_dict(span) for span in spans)
        except OSError:
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


def _data_point_to_dict(dp: Any) -> dict[str, Any]:
    point: dict[str, Any] = {
        "attributes": dict(dp.attributes) if getattr(dp, "attributes", None) else {},
        "start_time": getattr(dp, "start_time_unix_nano", None),
        "time": getattr(dp, "time_unix_nano", None),
    }
    for name in ("value", "count", "sum"):
        if hasattr(dp, name):
            point[name] = getattr(dp, name)
    return point


class FileMetricExporter(MetricExporter):
    """Export metrics to a JSONL file."""

    def __init__(self, output_path: str | Path, append: bool = True):
        super().__init__()
        self._file = _JsonLinesFile(output_path, append)
        self.output_path = self._file.output_path

    def export(
        self,
        metrics_data: MetricsData,
        timeout_millis: float = 10000,
        **kwargs,
    ) -> MetricExportResult:
        """Export metrics to file."""
        rows = []
        for resource_metrics in metrics_data.resource_metrics:
            resource_attrs = (
                dict(resource_metrics.resource.attributes) if resource_metrics.resource else {}
            )
            for scope_metrics in resource_metrics.scope_metrics:
                for metric in scope_metrics.metrics:
                    rows.append(
                        {
                            "name": metric.name,
                            "description": metric.description,
                            "unit": metric.unit,
                            "scope": scope_metrics.scope.name,
                            "resource": resource_attrs,
                            "timestamp": datetime.now().isoformat(),
                            "data_points": [
                                _data_point_to_dict(dp) for dp in metric.data.data_points
                            ],
                        }
                    )
        try:
            self._file.write(rows)
        except OSError:
            return MetricExportResult.FAILURE
        return MetricExportResult.SUCCESS

    def shutdown(self, timeout_millis: float = 30000, **kwargs) -> None:
        pass

    def force_flush(self, timeout_millis: float = 10000) -> bool:
        return True


def log_to_dict(item: Any) -> dict[str, Any]:
    """Serialize an exported log item (LogData or ReadableLogRecord, depending on SDK version)."""
    record = getattr(item, "log_record", item)
    resource = getattr(item, "resource", None) or getattr(record, "resource", None)
    severity_number = getattr(record, "severity_number", None)
    return {
        "timestamp": getattr(record, "timestamp", None),
        "observed_timestamp": getattr(record, "observed_timestamp", None),
        "severity_number": severity_number.value if severity_number else None,
        "severity_text": getattr(record, "severity_text", None),
        "body": getattr(record, "body", None),
        "attributes": dict(record.attributes) if getattr(record, "attributes", None) else {},
        "trace_id": _hex_id(getattr(record, "trace_id", None), 32),
        "span_id": _hex_id(getattr(record, "span_id", None), 16),
        "resource": dict(resource.attributes) if resource else {},
    }


class FileLogExporter(LogRecordExporter):
    """Export log records to a JSONL file."""

    def __init__(self, output_path: str | Path, append: bool = True):
        self._file = _JsonLinesFile(output_path, append)
        self.output_path = self._file.output_path

    def export(self, batch: Sequence) -> LogExportResult:  # type: ignore[override]
        """Export logs to file."""
        try:
            self._file.write(log_to_dict(item) for item in batch)
        except OSError:
            return LogExportResult.FAILURE
        return LogExportResult.SUCCESS

    def shutdown(self) -> None:
        pass

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True


def create_file_exporters(
    output_file: str | Path, metrics: bool = True, logs: bool = True
) -> ExporterSet:
    """File exporters: spans to output_file, metrics and logs to *_metrics.jsonl / *_logs.jsonl."""
    path = Path(output_file)
    stem = path.with_suffix("") if path.suffix else path
    return ExporterSet(
        FileSpanExporter(path),
        FileMetricExporter(f"{stem}_metrics.jsonl") if metrics else None,
        FileLogExporter(f"{stem}_logs.jsonl") if logs else None,
    )
