"""
Run loop coordinating span, log and metric generation.

Each iteration runs the span sequence, the log passes and the metric
observations strictly in that order, then pauses. Nothing is retried: any
exception (including GenerationInterrupted from a cancelled pause) moves the
runner to TERMINATED and propagates to the caller.
"""

import logging
from collections.abc import Callable
from enum import Enum

from .boundary import AgentBoundary, LoggingBoundary
from .defaults import DEFAULT_INTERVAL_MS, DEFAULT_ITERATIONS
from .emission import EmissionListener
from .generators.log_generator import LogGenerator
from .generators.metric_generator import MetricGenerator
from .generators.trace_generator import TraceGenerator
from .pacing import Pacer
from .pipeline import TelemetryPipeline

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class RunState(Enum):
    """Run-loop lifecycle."""

    IDLE = "idle"
    RUNNING = "running"
    TERMINATED = "terminated"


class GenerationRunner:
    """Drive the three generators for a bounded number of iterations."""

    def __init__(
        self,
        pipeline: TelemetryPipeline,
        pacer: Pacer | None = None,
        boundary: AgentBoundary | None = None,
        listener: EmissionListener | None = None,
        emit_logs: bool = True,
        emit_metrics: bool = True,
    ):
        """Initialize runner with a pipeline; generators share the pacer, boundary and listener."""
        self.pipeline = pipeline
        self.pacer = pacer or Pacer()
        self.boundary = boundary or LoggingBoundary()
        self.state = RunState.IDLE
        self.completed_iterations = 0

        self.trace_generator = TraceGenerator(
            pipeline.tracer_provider, self.pacer, self.boundary, listener
        )
        self.log_generator = None
        if emit_logs:
            self.log_generator = LogGenerator(
                pipeline.logger_provider, self.pacer, self.boundary, listener
            )
        self.metric_generator = None
        if emit_metrics:
            self.metric_generator = MetricGenerator(pipeline.meter_provider, listener)

    def run_iteration(self, iteration: int) -> None:
        """Spans, then logs, then metrics."""
        self.trace_generator.generate_spans()
        if self.log_generator is not None:
            self.log_generator.generate_logs(iteration)
        if self.metric_generator is not None:
            self.metric_generator.generate_metrics()

    def run(
        self,
        iterations: int = DEFAULT_ITERATIONS,
        interval_ms: float = DEFAULT_INTERVAL_MS,
        progress_callback: ProgressCallback | None = None,
    ) -> int:
        """Run iterations 1..iterations; returns the number completed."""
        if self.state is RunState.TERMINATED:
            raise RuntimeError("Runner already terminated")
        try:
            for i in range(1, iterations + 1):
                self.state = RunState.RUNNING
                self.run_iteration(i)
                self.completed_iterations = i
                self.state = RunState.IDLE
                if progress_callback:
                    progress_callback(i, iterations)
                self.pacer.pause(interval_ms)
        except BaseException:
            logger.error(
                "Generation aborted after %d completed iterations", self.completed_iterations
            )
            raise
        finally:
            self.state = RunState.TERMINATED
        return self.completed_iterations

    def stop(self) -> None:
        """Cancel the pending pause; the run ends with GenerationInterrupted."""
        self.pacer.cancel()

    def shutdown(self) -> None:
        """Flush and shut down the SDK providers."""
        self.pipeline.shutdown()
