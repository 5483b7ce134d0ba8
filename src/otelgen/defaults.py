"""
Run settings from environment.

OTELGEN_ITERATIONS, OTELGEN_INTERVAL_MS and OTELGEN_PAUSE_SCALE tune the run loop;
OTEL_SERVICE_NAME and OTEL_EXPORTER_OTLP_ENDPOINT follow the OpenTelemetry
environment conventions. CLI flags override every value here.
"""

import os
from dataclasses import dataclass

from .config import DEFAULT_ENDPOINT, DEFAULT_SERVICE_NAME

# Keeps the process alive roughly five minutes at one iteration per second,
# not counting the per-span and per-log pauses.
DEFAULT_ITERATIONS = 6000
DEFAULT_INTERVAL_MS = 1000.0
DEFAULT_PAUSE_SCALE = 1.0


@dataclass
class RunSettings:
    """Effective run-loop and pipeline settings."""

    iterations: int = DEFAULT_ITERATIONS
    interval_ms: float = DEFAULT_INTERVAL_MS
    pause_scale: float = DEFAULT_PAUSE_SCALE
    service_name: str = DEFAULT_SERVICE_NAME
    endpoint: str = DEFAULT_ENDPOINT


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise SystemExit(f"{name} must be an integer.") from None
    if value < 0:
        raise SystemExit(f"{name} must be non-negative.")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise SystemExit(f"{name} must be a number.") from None
    if value < 0:
        raise SystemExit(f"{name} must be non-negative.")
    return value


def get_run_settings() -> RunSettings:
    """Run settings from env, falling back to the reference defaults."""
    return RunSettings(
        iterations=_env_int("OTELGEN_ITERATIONS", DEFAULT_ITERATIONS),
        interval_ms=_env_float("OTELGEN_INTERVAL_MS", DEFAULT_INTERVAL_MS),
        pause_scale=_env_float("OTELGEN_PAUSE_SCALE", DEFAULT_PAUSE_SCALE),
        service_name=os.environ.get("OTEL_SERVICE_NAME", "").strip() or DEFAULT_SERVICE_NAME,
        endpoint=os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT", "").strip() or DEFAULT_ENDPOINT,
    )
