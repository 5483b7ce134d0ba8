"""
Generate demo spans through the OpenTelemetry Trace API.

Every span is started against an explicit parent Context (an empty Context when
none is given) instead of the ambient current span, and every span is ended
exactly once. Links can only be declared through SpanBuilder before the span
starts.

Demo sequence per generate_spans() call:
  upstreamSpan                                  [unit: upstreamSpan]
  downstreamSpan x20 -> link(upstreamSpan)      [unit: downstreamSpan]
  spanWithEvents (status ERROR, 2 exceptions)   [unit: createSpanEvents]
  noSpanKind
  noSpanKind                                    [unit: transactionNoSpanKind]
  clientSpanKind, owners select, example.com
  clientSpanKind, owners select, example.com    [unit: transactionClientSpanKind]
  consumerSpanKind
  producerSpanKind
  producerSpanKind                              [unit: transactionProducerSpanKind]
  serverSpanKind
"""

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import Link, Span, SpanContext, SpanKind, Status, StatusCode

from ..boundary import AgentBoundary, with_unit_of_work
from ..config import SCOPE_VERSION, TRACER_NAME
from ..emission import Emission, EmissionListener, Signal
from ..errors import SyntheticError, exception_attributes
from ..pacing import Pacer

logger = logging.getLogger(__name__)

T = TypeVar("T")

DOWNSTREAM_SPAN_COUNT = 20

# Simulated work per span, in milliseconds.
PAUSE_SPAN_MS = 1000
PAUSE_CLIENT_SPAN_MS = 2000
PAUSE_SERVER_SPAN_MS = 1500
PAUSE_WRAPPER_MS = 500

DB_CLIENT_ATTRIBUTES: dict[str, Any] = {
    "db.system": "mysql",
    "db.operation": "select",
    "db.sql.table": "owners",
    "db.statement": "SELECT * FROM owners WHERE ssn = 4566661792",
}

EXTERNAL_CLIENT_ATTRIBUTES: dict[str, Any] = {
    "server.address": "www.foo.bar",
    "url.full": "https://www.foo.bar:8080/search?q=OpenTelemetry#SemConv",
    "server.port": 8080,
    "http.request.method": "GET",
}

SERVER_ATTRIBUTES: dict[str, Any] = {"url.path": "/whatever"}


@dataclass
class SpanHandle:
    """A started span plus the bookkeeping needed to end it exactly once."""

    span: Span
    name: str
    parent_context: Context
    attributes: dict[str, Any] = field(default_factory=dict)
    unit_of_work: str | None = None
    status: Status = field(default_factory=Status)
    ended: bool = False

    @property
    def span_context(self) -> SpanContext:
        return self.span.get_span_context()

    @property
    def context(self) -> Context:
        """Context with this span as parent, for starting children."""
        return trace.set_span_in_context(self.span, self.parent_context)


class SpanBuilder:
    """Collect kind, attributes and links before a span starts."""

    def __init__(self, generator: "TraceGenerator", name: str):
        self._generator = generator
        self._name = name
        self._kind: SpanKind | None = None
        self._attributes: dict[str, Any] = {}
        self._links: list[Link] = []

    def set_kind(self, kind: SpanKind | None) -> "SpanBuilder":
        self._kind = kind
        return self

    def set_attribute(self, key: str, value: Any) -> "SpanBuilder":
        self._attributes[key] = value
        return self

    def set_attributes(self, attributes: dict[str, Any]) -> "SpanBuilder":
        self._attributes.update(attributes)
        return self

    def add_link(
        self, span_context: SpanContext, attributes: dict[str, Any] | None = None
    ) -> "SpanBuilder":
        self._links.append(Link(span_context, attributes or {}))
        return self

    def start(self, context: Context | None = None) -> SpanHandle:
        """Start the span under context; no link can be added afterwards."""
        return self._generator.start_span(
            self._name,
            kind=self._kind,
            attributes=self._attributes,
            links=self._links,
            context=context,
        )


class TraceGenerator:
    """Span emitter: span lifecycle operations plus the demo span sequence."""

    def __init__(
        self,
        tracer_provider: TracerProvider,
        pacer: Pacer | None = None,
        boundary: AgentBoundary | None = None,
        listener: EmissionListener | None = None,
    ):
        """Initialize trace generator with a tracer provider."""
        self.tracer = tracer_provider.get_tracer(TRACER_NAME, SCOPE_VERSION)
        self.pacer = pacer or Pacer()
        self.boundary = boundary or AgentBoundary()
        self.listener = listener

    # Span lifecycle

    def span_builder(self, name: str) -> SpanBuilder:
        return SpanBuilder(self, name)

    def start_span(
        self,
        name: str,
        kind: SpanKind | None = None,
        attributes: dict[str, Any] | None = None,
        links: list[Link] | None = None,
        context: Context | None = None,
    ) -> SpanHandle:
        """Start a span under context (empty Context when None, never the ambient one)."""
        parent = context if context is not None else Context()
        attrs = dict(attributes or {})
        span = self.tracer.start_span(
            name,
            context=parent,
            kind=kind if kind is not None else SpanKind.INTERNAL,
            attributes=attrs,
            links=list(links or []),
        )
        return SpanHandle(
            span=span,
            name=name,
            parent_context=parent,
            attributes=attrs,
            unit_of_work=self.boundary.current,
        )

    def add_event(
        self,
        handle: SpanHandle,
        name: str,
        attributes: dict[str, Any] | None = None,
        timestamp: int | None = None,
    ) -> None:
        """Append an event; ignored once the span has ended."""
        if handle.ended:
            return
        handle.span.add_event(name, attributes=attributes, timestamp=timestamp)

    def set_status(
        self, handle: SpanHandle, code: StatusCode, description: str | None = None
    ) -> None:
        """Set the terminal status; the last call before end() wins."""
        if handle.ended:
            return
        # The SDK only keeps a description for ERROR.
        handle.status = Status(code, description if code is StatusCode.ERROR else None)

    def record_exception(
        self,
        handle: SpanHandle,
        error: BaseException,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """Record an exception event without ending the span."""
        if handle.ended:
            return
        handle.span.record_exception(error, attributes=attributes)

    def end(self, handle: SpanHandle) -> None:
        """Seal the span. Calls after the first are no-ops."""
        if handle.ended:
            return
        handle.ended = True
        if handle.status.status_code is not StatusCode.UNSET:
            handle.span.set_status(handle.status)
        handle.span.end()
        if self.listener is not None:
            self.listener(
                Emission(
                    signal=Signal.SPAN,
                    name=handle.name,
                    unit_of_work=handle.unit_of_work,
                    attributes=dict(handle.attributes),
                )
            )

    @contextmanager
    def span_scope(
        self,
        name: str,
        kind: SpanKind | None = None,
        attributes: dict[str, Any] | None = None,
        links: list[Link] | None = None,
        context: Context | None = None,
    ) -> Iterator[SpanHandle]:
        """Start a span, record any escaping exception on it, and always end it."""
        handle = self.start_span(name, kind, attributes, links, context)
        try:
            yield handle
        except Exception as exc:
            self.record_exception(handle, exc)
            raise
        finally:
            self.end(handle)

    def _in_unit(self, name: str, fn: Callable[..., T]) -> Callable[..., T]:
        return with_unit_of_work(self.boundary, fn, name)

    # Demo sequence

    def generate_spans(self, context: Context | None = None) -> None:
        """Emit the full demo span sequence under context."""
        logger.info("===== Generating OpenTelemetry Spans =====")
        ctx = context if context is not None else Context()

        self.create_span_links(ctx)
        self._in_unit("createSpanEvents", self.create_span_events)(ctx)

        self.no_span_kind(ctx)
        self._in_unit("transactionNoSpanKind", self.transaction_no_span_kind)(ctx)

        self.client_span_kind(ctx)
        self.db_client_span_kind(ctx)
        self.external_client_span_kind(ctx)
        self._in_unit("transactionClientSpanKind", self.transaction_client_span_kind)(ctx)

        self.consumer_span_kind(ctx)
        self.producer_span_kind(ctx)
        self._in_unit("transactionProducerSpanKind", self.transaction_producer_span_kind)(ctx)

        self.server_span_kind(ctx)

    def create_span_links(self, context: Context) -> list[SpanContext]:
        """One upstream span, then DOWNSTREAM_SPAN_COUNT spans linked back to it."""
        logger.debug("Called createSpanLinks")
        upstream = self._in_unit("upstreamSpan", self.upstream_span)(context)
        downstream = self._in_unit("downstreamSpan", self.downstream_span)
        linked = [downstream(upstream, i, context) for i in range(DOWNSTREAM_SPAN_COUNT)]
        self.pacer.pause(PAUSE_WRAPPER_MS)
        return linked

    def upstream_span(self, context: Context) -> SpanContext:
        """Create the upstream span and return its SpanContext."""
        with self.span_scope("upstreamSpan", context=context) as span:
            logger.debug("Called upstreamSpan")
            span_context = span.span_context
            self.pacer.pause(PAUSE_SPAN_MS)
        return span_context

    def downstream_span(
        self, upstream: SpanContext, iteration: int, context: Context
    ) -> SpanContext:
        """Create a span linked to upstream, tagged with the link iteration."""
        span = (
            self.span_builder("downstreamSpan")
            .add_link(upstream, {"iteration": iteration, "customLinkAttribute": "someValue"})
            .start(context)
        )
        try:
            logger.debug("Called downstreamSpan")
            self.set_status(span, StatusCode.OK, "All is good in the downstreamSpan")
            self.pacer.pause(PAUSE_SPAN_MS)
        except Exception as exc:
            self.record_exception(span, exc)
            raise
        finally:
            self.end(span)
        return span.span_context

    def create_span_events(self, context: Context) -> None:
        """Span with every add_event variant, then a caught synthetic error."""
        logger.debug("Called createSpanEvents")
        with self.span_scope("spanWithEvents", context=context) as span:
            self.add_event(span, "event1")
            self.add_event(span, "event2", timestamp=time.time_ns())
            self.add_event(span, "event3", {"foo": "bar"})
            self.add_event(span, "event4", {"bar": "baz"}, time.time_ns())
            self.add_event(span, "event5", {"baz": "buz"}, time.time_ns())
            self.add_event(span, "event6", timestamp=time.time_ns())
            try:
                self.pacer.pause(PAUSE_SPAN_MS)
                raise SyntheticError("Exception in createSpanEventException")
            except SyntheticError as exc:
                self.set_status(
                    span, StatusCode.ERROR, "Welp... we've got an error in createSpanEvents"
                )
                self.record_exception(span, exc)
                self.record_exception(span, exc, exception_attributes(exc))

    def no_span_kind(self, context: Context) -> None:
        with self.span_scope("noSpanKind", context=context):
            logger.debug("Called noSpanKind")
            self.pacer.pause(PAUSE_SPAN_MS)

    def transaction_no_span_kind(self, context: Context) -> None:
        """noSpanKind inside a unit of work."""
        logger.debug("Called transactionNoSpanKind")
        self.no_span_kind(context)
        self.pacer.pause(PAUSE_WRAPPER_MS)

    def client_span_kind(self, context: Context) -> None:
        with self.span_scope("clientSpanKind", SpanKind.CLIENT, context=context):
            logger.debug("Called clientSpanKind")
            self.pacer.pause(PAUSE_CLIENT_SPAN_MS)

    def db_client_span_kind(self, context: Context) -> None:
        """Client span carrying database call attributes."""
        with self.span_scope(
            "owners select", SpanKind.CLIENT, DB_CLIENT_ATTRIBUTES, context=context
        ):
            logger.debug("Called dbClientSpanKind")
            self.pacer.pause(PAUSE_CLIENT_SPAN_MS)

    def external_client_span_kind(self, context: Context) -> None:
        """Client span carrying external HTTP call attributes."""
        with self.span_scope(
            "example.com", SpanKind.CLIENT, EXTERNAL_CLIENT_ATTRIBUTES, context=context
        ):
            logger.debug("Called externalClientSpanKind")
            self.pacer.pause(PAUSE_CLIENT_SPAN_MS)

    def transaction_client_span_kind(self, context: Context) -> None:
        """The three client spans inside a unit of work."""
        logger.debug("Called transactionClientSpanKind")
        self.client_span_kind(context)
        self.db_client_span_kind(context)
        self.external_client_span_kind(context)
        self.pacer.pause(PAUSE_WRAPPER_MS)

    def consumer_span_kind(self, context: Context) -> None:
        with self.span_scope("consumerSpanKind", SpanKind.CONSUMER, context=context):
            logger.debug("Called consumerSpanKind")
            self.pacer.pause(PAUSE_SPAN_MS)

    def producer_span_kind(self, context: Context) -> None:
        with self.span_scope("producerSpanKind", SpanKind.PRODUCER, context=context):
            logger.debug("Called producerSpanKind")
            self.pacer.pause(PAUSE_SPAN_MS)

    def transaction_producer_span_kind(self, context: Context) -> None:
        """producerSpanKind inside a unit of work."""
        logger.debug("Called transactionProducerSpanKind")
        self.producer_span_kind(context)
        self.pacer.pause(PAUSE_WRAPPER_MS)

    def server_span_kind(self, context: Context) -> None:
        with self.span_scope(
            "serverSpanKind", SpanKind.SERVER, SERVER_ATTRIBUTES, context=context
        ):
            logger.debug("Called serverSpanKind")
            self.pacer.pause(PAUSE_SERVER_SPAN_MS)
