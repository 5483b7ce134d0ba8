"""
Generate demo log records through the OpenTelemetry Logs API.

Records are built and emitted directly on an OTEL Logger (not via the stdlib
logging bridge) so every severity from TRACE to FATAL, explicit timestamps and
an explicit span context can be set. Each generate_logs() call runs two passes:
one inside a unit-of-work boundary (correlated) and one outside it
(uncorrelated), each emitting one record per severity.
"""

import logging
import time
from collections.abc import Callable
from enum import Enum
from typing import Any, TypeVar

from opentelemetry._logs import LogRecord, SeverityNumber
from opentelemetry.context import Context
from opentelemetry.sdk._logs import LoggerProvider

from ..boundary import AgentBoundary, with_unit_of_work
from ..config import LOGGER_NAME, SCOPE_SCHEMA_URL, SCOPE_VERSION
from ..emission import Emission, EmissionListener, Signal
from ..errors import SyntheticError, exception_attributes
from ..pacing import Pacer

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAUSE_LOG_MS = 1000


class Severity(Enum):
    """Log severities, valued by their OTEL severity number."""

    TRACE = SeverityNumber.TRACE
    DEBUG = SeverityNumber.DEBUG
    INFO = SeverityNumber.INFO
    WARN = SeverityNumber.WARN
    ERROR = SeverityNumber.ERROR
    FATAL = SeverityNumber.FATAL


# Emission order per pass; info comes before debug.
DEMO_SEVERITIES = (
    Severity.TRACE,
    Severity.INFO,
    Severity.DEBUG,
    Severity.WARN,
    Severity.ERROR,
    Severity.FATAL,
)


class LogGenerator:
    """Log emitter: one-shot record emission plus the demo log passes."""

    def __init__(
        self,
        logger_provider: LoggerProvider,
        pacer: Pacer | None = None,
        boundary: AgentBoundary | None = None,
        listener: EmissionListener | None = None,
    ):
        """Initialize log generator with a logger provider."""
        self.logger = logger_provider.get_logger(
            LOGGER_NAME,
            version=SCOPE_VERSION,
            schema_url=SCOPE_SCHEMA_URL,
        )
        self.pacer = pacer or Pacer()
        self.boundary = boundary or AgentBoundary()
        self.listener = listener

    def emit(
        self,
        body: str,
        severity: Severity,
        attributes: dict[str, Any] | None = None,
        timestamp: int | None = None,
        context: Context | None = None,
    ) -> None:
        """Build and emit one log record.

        timestamp defaults to now (ns since epoch); the observed timestamp is
        always now. The record is correlated only to a span held by context,
        never to the ambient current span.
        """
        now = time.time_ns()
        attrs = dict(attributes or {})
        kwargs: dict[str, Any] = {
            "timestamp": timestamp if timestamp is not None else now,
            "observed_timestamp": now,
            "severity_text": severity.name,
            "severity_number": severity.value,
            "body": body,
            "attributes": attrs,
            "context": context if context is not None else Context(),
        }
        self.logger.emit(LogRecord(**kwargs))
        if self.listener is not None:
            self.listener(
                Emission(
                    signal=Signal.LOG,
                    name=severity.name,
                    unit_of_work=self.boundary.current,
                    attributes=attrs,
                )
            )

    def generate_logs(self, iteration: int) -> None:
        """Emit the correlated pass, then the uncorrelated pass."""
        logger.info("===== Generating OpenTelemetry Logs =====")
        self._in_unit("logInTransaction", self.log_at_different_severities)(iteration)
        self.log_at_different_severities(iteration)

    def _in_unit(self, name: str, fn: Callable[..., T]) -> Callable[..., T]:
        return with_unit_of_work(self.boundary, fn, name)

    def log_at_different_severities(self, iteration: int) -> None:
        for severity in DEMO_SEVERITIES:
            self.emit_demo_log(iteration, severity)
            self.pacer.pause(PAUSE_LOG_MS)

    def emit_demo_log(self, iteration: int, severity: Severity) -> None:
        """One demo record; ERROR records carry exception attributes."""
        attrs: dict[str, Any] = {"foo": "bar"}
        if severity is Severity.ERROR:
            try:
                raise SyntheticError("This is a test exception for severity ERROR")
            except SyntheticError as exc:
                attrs.update(exception_attributes(exc))
        self.emit(
            f"Generating OpenTelemetry LogRecord - Iteration {iteration}",
            severity,
            attrs,
        )
