"""Tests for the metric emitter and its instrument registry."""

import pytest
from conftest import collect_data_points

from otelgen.config import METER_NAME
from otelgen.emission import Signal
from otelgen.generators.metric_generator import InstrumentKind


def test_registry_returns_same_instrument(metric_generator) -> None:
    registry = metric_generator.registry
    first = registry.get("requests", InstrumentKind.COUNTER)
    second = registry.get("requests", InstrumentKind.COUNTER)

    assert first is second
    assert len(registry) == 1
    registry.get("requests", InstrumentKind.HISTOGRAM)
    assert len(registry) == 2


def test_counter_accumulates(metric_generator, metric_reader) -> None:
    metric_generator.record("hits", InstrumentKind.COUNTER, 1, {"route": "a"})
    metric_generator.record("hits", InstrumentKind.COUNTER, 1, {"route": "a"})

    (point,) = collect_data_points(metric_reader)["hits"]
    assert point.value == 2
    assert dict(point.attributes) == {"route": "a"}


def test_counter_rejects_negative_delta(metric_generator, emissions) -> None:
    with pytest.raises(ValueError):
        metric_generator.record("hits", InstrumentKind.COUNTER, -1)
    assert emissions == []


def test_up_down_counter_accepts_negative_delta(metric_generator, metric_reader) -> None:
    metric_generator.record("queue", InstrumentKind.UP_DOWN_COUNTER, 5)
    metric_generator.record("queue", InstrumentKind.UP_DOWN_COUNTER, -2)

    (point,) = collect_data_points(metric_reader)["queue"]
    assert point.value == 3


def test_gauge_keeps_last_value(metric_generator, metric_reader) -> None:
    metric_generator.record("temp", InstrumentKind.GAUGE, 10)
    metric_generator.record("temp", InstrumentKind.GAUGE, 4)

    (point,) = collect_data_points(metric_reader)["temp"]
    assert point.value == 4


def test_generate_metrics(metric_generator, metric_reader, emissions) -> None:
    metric_generator.generate_metrics()

    points = collect_data_points(metric_reader)
    (counter,) = points[f"{METER_NAME}.longcounter"]
    (histogram,) = points[f"{METER_NAME}.histogram"]
    (gauge,) = points[f"{METER_NAME}.gauge"]
    (updown,) = points[f"{METER_NAME}.updowncounter"]

    assert counter.value == 1
    assert dict(counter.attributes) == {"LongCounter": "foo"}
    assert (histogram.count, histogram.sum) == (1, 3)
    assert dict(histogram.attributes) == {"DoubleHistogram": "foo"}
    assert gauge.value == 5
    assert dict(gauge.attributes) == {"DoubleGauge": "foo"}
    assert updown.value == 7
    assert dict(updown.attributes) == {"LongUpDownCounter": "foo"}

    assert [e.signal for e in emissions] == [Signal.METRIC] * 4
    assert all(e.unit_of_work is None for e in emissions)


def test_generate_metrics_reuses_instruments(metric_generator, metric_reader) -> None:
    metric_generator.generate_metrics()
    metric_generator.generate_metrics()

    assert len(metric_generator.registry) == 4
    (counter,) = collect_data_points(metric_reader)[f"{METER_NAME}.longcounter"]
    assert counter.value == 2
