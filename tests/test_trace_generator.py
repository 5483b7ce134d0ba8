"""Tests for the span emitter: lifecycle rules and the demo span sequence."""

import pytest
from opentelemetry.context import Context
from opentelemetry.trace import SpanKind, StatusCode

from otelgen.emission import Signal
from otelgen.errors import GenerationInterrupted
from otelgen.generators.trace_generator import (
    DB_CLIENT_ATTRIBUTES,
    DOWNSTREAM_SPAN_COUNT,
    EXTERNAL_CLIENT_ATTRIBUTES,
)

DEMO_SPAN_NAMES = (
    ["upstreamSpan"]
    + ["downstreamSpan"] * 20
    + [
        "spanWithEvents",
        "noSpanKind",
        "noSpanKind",
        "clientSpanKind",
        "owners select",
        "example.com",
        "clientSpanKind",
        "owners select",
        "example.com",
        "consumerSpanKind",
        "producerSpanKind",
        "producerSpanKind",
        "serverSpanKind",
    ]
)


def _spans_named(span_exporter, name):
    return [s for s in span_exporter.get_finished_spans() if s.name == name]


def test_end_is_idempotent(trace_generator, span_exporter, emissions) -> None:
    """A second end() neither re-exports the span nor notifies the listener again."""
    handle = trace_generator.start_span("once")
    trace_generator.end(handle)
    trace_generator.end(handle)

    assert handle.ended
    assert len(span_exporter.get_finished_spans()) == 1
    assert [e.name for e in emissions] == ["once"]


def test_mutation_after_end_is_ignored(trace_generator, span_exporter) -> None:
    """Events, status and exceptions after end() leave the exported span unchanged."""
    handle = trace_generator.start_span("sealed")
    trace_generator.add_event(handle, "before")
    trace_generator.end(handle)

    trace_generator.add_event(handle, "after")
    trace_generator.set_status(handle, StatusCode.ERROR, "too late")
    trace_generator.record_exception(handle, ValueError("too late"))

    (span,) = span_exporter.get_finished_spans()
    assert [e.name for e in span.events] == ["before"]
    assert span.status.status_code is StatusCode.UNSET


@pytest.mark.parametrize(
    ("writes", "expected"),
    [
        ([(StatusCode.ERROR, "boom"), (StatusCode.OK, None)], (StatusCode.OK, None)),
        ([(StatusCode.OK, None), (StatusCode.ERROR, "boom")], (StatusCode.ERROR, "boom")),
    ],
)
def test_set_status_last_write_wins(trace_generator, span_exporter, writes, expected) -> None:
    """Only the final set_status before end() is exported."""
    handle = trace_generator.start_span("status")
    for code, description in writes:
        trace_generator.set_status(handle, code, description)
    trace_generator.end(handle)

    (span,) = span_exporter.get_finished_spans()
    assert (span.status.status_code, span.status.description) == expected


def test_record_exception_does_not_end_span(trace_generator, span_exporter) -> None:
    """record_exception adds an exception event and leaves the span open."""
    handle = trace_generator.start_span("with-exception")
    trace_generator.record_exception(handle, ValueError("bad"), {"custom": "yes"})

    assert not handle.ended
    assert span_exporter.get_finished_spans() == ()
    trace_generator.end(handle)

    (span,) = span_exporter.get_finished_spans()
    (event,) = span.events
    assert event.name == "exception"
    assert event.attributes["exception.message"] == "bad"
    assert event.attributes["custom"] == "yes"


def test_span_scope_ends_and_records_on_error(trace_generator, span_exporter) -> None:
    """span_scope records the escaping exception, re-raises it and ends the span."""
    with pytest.raises(ValueError):
        with trace_generator.span_scope("failing") as handle:
            raise ValueError("escaping")

    assert handle.ended
    (span,) = span_exporter.get_finished_spans()
    assert [e.name for e in span.events] == ["exception"]


def test_builder_links_and_kind(trace_generator, span_exporter) -> None:
    """Links and kind declared on the builder land on the started span."""
    target = trace_generator.start_span("target")
    trace_generator.end(target)

    handle = (
        trace_generator.span_builder("linked")
        .set_kind(SpanKind.PRODUCER)
        .set_attribute("k", "v")
        .add_link(target.span_context, {"why": "test"})
        .start()
    )
    trace_generator.end(handle)

    (span,) = _spans_named(span_exporter, "linked")
    assert span.kind is SpanKind.PRODUCER
    assert span.attributes["k"] == "v"
    (link,) = span.links
    assert link.context == target.span_context
    assert link.attributes["why"] == "test"


def test_explicit_parent_context(trace_generator, span_exporter, pipeline) -> None:
    """Children nest only through an explicit context, never through the ambient span."""
    parent = trace_generator.start_span("parent")
    child = trace_generator.start_span("child", context=parent.context)
    trace_generator.end(child)

    ambient_tracer = pipeline.tracer_provider.get_tracer("ambient")
    with ambient_tracer.start_as_current_span("ambient"):
        orphan = trace_generator.start_span("orphan")
        trace_generator.end(orphan)
    trace_generator.end(parent)

    (child_span,) = _spans_named(span_exporter, "child")
    (orphan_span,) = _spans_named(span_exporter, "orphan")
    assert child_span.parent.span_id == parent.span_context.span_id
    assert child_span.context.trace_id == parent.span_context.trace_id
    assert orphan_span.parent is None


def test_downstream_spans_link_to_upstream(trace_generator, span_exporter) -> None:
    """All downstream spans link to the single upstream span with their loop index."""
    trace_generator.create_span_links(Context())

    (upstream,) = _spans_named(span_exporter, "upstreamSpan")
    downstream = _spans_named(span_exporter, "downstreamSpan")
    assert len(downstream) == DOWNSTREAM_SPAN_COUNT
    for i, span in enumerate(downstream):
        (link,) = span.links
        assert link.context == upstream.context
        assert link.attributes["iteration"] == i
        assert link.attributes["customLinkAttribute"] == "someValue"
        assert span.status.status_code is StatusCode.OK


def test_client_span_attribute_conventions(trace_generator, span_exporter) -> None:
    """Database and external client spans carry exactly their convention attributes."""
    trace_generator.db_client_span_kind(Context())
    trace_generator.external_client_span_kind(Context())

    (db,) = _spans_named(span_exporter, "owners select")
    (external,) = _spans_named(span_exporter, "example.com")
    assert db.kind is SpanKind.CLIENT
    assert dict(db.attributes) == DB_CLIENT_ATTRIBUTES
    assert set(db.attributes) == {"db.system", "db.operation", "db.sql.table", "db.statement"}
    assert external.kind is SpanKind.CLIENT
    assert dict(external.attributes) == EXTERNAL_CLIENT_ATTRIBUTES
    assert set(external.attributes) == {
        "server.address",
        "url.full",
        "server.port",
        "http.request.method",
    }


def test_span_with_events(trace_generator, span_exporter) -> None:
    """Every add_event variant plus two exception events and an ERROR status."""
    trace_generator.create_span_events(Context())

    (span,) = _spans_named(span_exporter, "spanWithEvents")
    names = [e.name for e in span.events]
    assert names == [f"event{i}" for i in range(1, 7)] + ["exception", "exception"]
    assert span.events[2].attributes["foo"] == "bar"
    assert span.status.status_code is StatusCode.ERROR
    assert span.status.description == "Welp... we've got an error in createSpanEvents"

    bare, detailed = span.events[-2:]
    assert bare.attributes["exception.type"].endswith("SyntheticError")
    assert detailed.attributes["exception.type"] == "otelgen.errors.SyntheticError"
    assert detailed.attributes["exception.message"] == "Exception in createSpanEventException"
    assert "SyntheticError" in detailed.attributes["exception.stacktrace"]


def test_generate_spans_sequence(trace_generator, span_exporter) -> None:
    """The demo sequence ends spans in the documented order with the documented kinds."""
    trace_generator.generate_spans()

    spans = span_exporter.get_finished_spans()
    assert [s.name for s in spans] == DEMO_SPAN_NAMES
    kinds = {s.name: s.kind for s in spans}
    assert kinds["noSpanKind"] is SpanKind.INTERNAL
    assert kinds["consumerSpanKind"] is SpanKind.CONSUMER
    assert kinds["producerSpanKind"] is SpanKind.PRODUCER
    assert kinds["serverSpanKind"] is SpanKind.SERVER
    server = next(s for s in spans if s.name == "serverSpanKind")
    assert server.attributes["url.path"] == "/whatever"
    assert all(s.parent is None for s in spans)


def test_generate_spans_units_of_work(trace_generator, emissions, boundary) -> None:
    """Wrapped variants run inside units of work; bare variants do not."""
    trace_generator.generate_spans()

    span_units = [(e.name, e.unit_of_work) for e in emissions if e.signal is Signal.SPAN]
    assert span_units[0] == ("upstreamSpan", "upstreamSpan")
    assert span_units[22:24] == [
        ("noSpanKind", None),
        ("noSpanKind", "transactionNoSpanKind"),
    ]
    assert span_units[27:30] == [
        ("clientSpanKind", "transactionClientSpanKind"),
        ("owners select", "transactionClientSpanKind"),
        ("example.com", "transactionClientSpanKind"),
    ]
    assert span_units[-1] == ("serverSpanKind", None)
    assert boundary.current is None
    assert boundary.signals.count(("enter", "downstreamSpan")) == DOWNSTREAM_SPAN_COUNT


def test_interrupted_pause_is_fatal(trace_generator, span_exporter, pacer, boundary) -> None:
    """A cancelled pause propagates, but the open span is still ended with the error."""
    pacer.cancel()
    with pytest.raises(GenerationInterrupted):
        trace_generator.generate_spans()

    (span,) = span_exporter.get_finished_spans()
    assert span.name == "upstreamSpan"
    assert [e.name for e in span.events] == ["exception"]
    assert boundary.current is None
