"""
Generate demo metrics through the OpenTelemetry Metrics API.

Instruments are fetched-or-created through an InstrumentRegistry owned by the
generator, so the same (name, kind) always resolves to the same instrument
object for the life of the process.
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from opentelemetry.metrics import Meter
from opentelemetry.sdk.metrics import MeterProvider

from ..config import METER_NAME, SCOPE_VERSION
from ..emission import Emission, EmissionListener, Signal

logger = logging.getLogger(__name__)


class InstrumentKind(Enum):
    """Supported synchronous instrument kinds."""

    COUNTER = "counter"
    UP_DOWN_COUNTER = "up_down_counter"
    HISTOGRAM = "histogram"
    GAUGE = "gauge"


@dataclass(frozen=True)
class DemoObservation:
    """One fixed observation made on every generate_metrics() call."""

    name: str
    kind: InstrumentKind
    value: float
    attributes: dict[str, str]


DEMO_OBSERVATIONS = (
    DemoObservation(
        f"{METER_NAME}.longcounter", InstrumentKind.COUNTER, 1, {"LongCounter": "foo"}
    ),
    DemoObservation(
        f"{METER_NAME}.histogram", InstrumentKind.HISTOGRAM, 3, {"DoubleHistogram": "foo"}
    ),
    DemoObservation(f"{METER_NAME}.gauge", InstrumentKind.GAUGE, 5, {"DoubleGauge": "foo"}),
    DemoObservation(
        f"{METER_NAME}.updowncounter",
        InstrumentKind.UP_DOWN_COUNTER,
        7,
        {"LongUpDownCounter": "foo"},
    ),
)


class InstrumentRegistry:
    """Process-lifetime instrument cache keyed by (name, kind)."""

    def __init__(self, meter: Meter):
        self.meter = meter
        self._instruments: dict[tuple[str, InstrumentKind], Any] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._instruments)

    def get(
        self,
        name: str,
        kind: InstrumentKind,
        unit: str = "",
        description: str = "",
    ) -> Any:
        """Return the instrument for (name, kind), creating it on first use."""
        key = (name, kind)
        with self._lock:
            instrument = self._instruments.get(key)
            if instrument is None:
                instrument = self._create(name, kind, unit, description)
                self._instruments[key] = instrument
            return instrument

    def _create(self, name: str, kind: InstrumentKind, unit: str, description: str) -> Any:
        if kind is InstrumentKind.COUNTER:
            return self.meter.create_counter(name, unit=unit, description=description)
        if kind is InstrumentKind.UP_DOWN_COUNTER:
            return self.meter.create_up_down_counter(name, unit=unit, description=description)
        if kind is InstrumentKind.HISTOGRAM:
            return self.meter.create_histogram(name, unit=unit, description=description)
        if kind is InstrumentKind.GAUGE:
            return self.meter.create_gauge(name, unit=unit, description=description)
        raise ValueError(f"Unsupported instrument kind: {kind}")


class MetricGenerator:
    """Metric emitter: single observations plus the demo observation set."""

    def __init__(
        self,
        meter_provider: MeterProvider,
        listener: EmissionListener | None = None,
        registry: InstrumentRegistry | None = None,
    ):
        """Initialize metric generator with a meter provider."""
        self.meter = meter_provider.get_meter(METER_NAME, SCOPE_VERSION)
        self.registry = registry or InstrumentRegistry(self.meter)
        self.listener = listener

    def record(
        self,
        name: str,
        kind: InstrumentKind,
        value: float,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """Make one observation on the (name, kind) instrument.

        Counters take non-negative deltas, up-down counters signed deltas,
        gauges absolute values and histograms samples.
        """
        if kind is InstrumentKind.COUNTER and value < 0:
            raise ValueError(f"Counter {name} only accepts non-negative deltas, got {value}")
        attrs = dict(attributes or {})
        instrument = self.registry.get(name, kind)
        if kind in (InstrumentKind.COUNTER, InstrumentKind.UP_DOWN_COUNTER):
            instrument.add(value, attrs)
        elif kind is InstrumentKind.HISTOGRAM:
            instrument.record(value, attrs)
        else:
            instrument.set(value, attrs)
        if self.listener is not None:
            self.listener(Emission(signal=Signal.METRIC, name=name, attributes=attrs))

    def generate_metrics(self) -> None:
        """One observation per instrument kind."""
        logger.info("===== Generating OpenTelemetry Dimensional Metrics =====")
        for obs in DEMO_OBSERVATIONS:
            self.record(obs.name, obs.kind, obs.value, obs.attributes)
            logger.debug("Recorded %s %s=%s", obs.kind.value, obs.name, obs.value)
