"""
Unit-of-work boundary markers for an external instrumentation agent.

A boundary delimits an agent-observed operation (a "transaction" in most APM
agents). Entering and exiting are pure signals: they carry no telemetry payload
and never create spans or log records. with_unit_of_work() turns any callable
into one that is bracketed by these signals on every exit path.
"""

import functools
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class UnitOfWork:
    """An open unit of work; returned by enter() and handed back to exit()."""

    name: str
    depth: int
    started_ns: int = field(default_factory=time.time_ns)


class AgentBoundary:
    """Tracks open units of work and signals entry/exit to subclasses."""

    def __init__(self) -> None:
        self._open: list[UnitOfWork] = []

    @property
    def current(self) -> str | None:
        """Name of the innermost open unit of work, or None."""
        return self._open[-1].name if self._open else None

    def enter(self, name: str) -> UnitOfWork:
        """Open a unit of work."""
        unit = UnitOfWork(name=name, depth=len(self._open))
        self._open.append(unit)
        self.on_enter(unit)
        return unit

    def exit(self, unit: UnitOfWork, error: BaseException | None = None) -> None:
        """Close a unit of work; units close innermost first."""
        if not self._open or self._open[-1] is not unit:
            raise RuntimeError(f"Unit of work {unit.name!r} is not the innermost open unit")
        self._open.pop()
        self.on_exit(unit, error)

    def on_enter(self, unit: UnitOfWork) -> None:
        pass

    def on_exit(self, unit: UnitOfWork, error: BaseException | None) -> None:
        pass


class LoggingBoundary(AgentBoundary):
    """Boundary that reports entry/exit through stdlib logging."""

    def on_enter(self, unit: UnitOfWork) -> None:
        logger.debug("enter unit of work %s (depth %d)", unit.name, unit.depth)

    def on_exit(self, unit: UnitOfWork, error: BaseException | None) -> None:
        elapsed_ms = (time.time_ns() - unit.started_ns) / 1_000_000
        if error is not None:
            logger.debug(
                "exit unit of work %s after %.1fms with %s",
                unit.name,
                elapsed_ms,
                type(error).__name__,
            )
        else:
            logger.debug("exit unit of work %s after %.1fms", unit.name, elapsed_ms)


def with_unit_of_work(
    boundary: AgentBoundary,
    fn: Callable[..., T],
    name: str | None = None,
) -> Callable[..., T]:
    """Wrap fn so each call runs inside a unit of work named name (default: fn.__name__)."""
    unit_name = name or getattr(fn, "__name__", "unitOfWork")

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        unit = boundary.enter(unit_name)
        try:
            result = fn(*args, **kwargs)
        except BaseException as exc:
            boundary.exit(unit, exc)
            raise
        boundary.exit(unit)
        return result

    return wrapper
