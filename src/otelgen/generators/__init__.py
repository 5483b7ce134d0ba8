"""Telemetry generators for traces, metrics, and logs."""

from .log_generator import LogGenerator, Severity
from .metric_generator import InstrumentKind, InstrumentRegistry, MetricGenerator
from .trace_generator import SpanBuilder, SpanHandle, TraceGenerator

__all__ = [
    "TraceGenerator",
    "SpanBuilder",
    "SpanHandle",
    "MetricGenerator",
    "InstrumentKind",
    "InstrumentRegistry",
    "LogGenerator",
    "Severity",
]
