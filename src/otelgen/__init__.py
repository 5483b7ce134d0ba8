"""
otelgen - Synthetic OpenTelemetry telemetry generator.

This package drives the OpenTelemetry trace, log and metric APIs in a fixed
loop so an attached instrumentation agent or OTLP backend has data to harvest.
"""

__version__ = "1.0.0"
