"""Journal entries describing each emitted span, log record and metric observation."""

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Signal(Enum):
    """Telemetry signal an emission belongs to."""

    SPAN = "span"
    LOG = "log"
    METRIC = "metric"


@dataclass(frozen=True)
class Emission:
    """One item handed to the SDK pipeline.

    unit_of_work is the innermost unit-of-work boundary open when the item was
    emitted, or None when it was emitted outside any boundary.
    """

    signal: Signal
    name: str
    unit_of_work: str | None = None
    attributes: dict[str, Any] = field(default_factory=dict)


EmissionListener = Callable[[Emission], None]
