"""
Cancellable pauses standing in for simulated work.

Every pause in the emission sequence goes through a Pacer. Durations are scaled
by pause_scale (0 turns all pauses off, useful in tests and for bursts), and the
wait is on a threading.Event so cancel() from a signal handler ends the run at
the next pause instead of after the current sleep.
"""

import threading

from .errors import GenerationInterrupted


class Pacer:
    """Scaled, cancellable blocking pauses."""

    def __init__(self, pause_scale: float = 1.0):
        if pause_scale < 0:
            raise ValueError("pause_scale must be non-negative")
        self.pause_scale = pause_scale
        self._stop_event = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._stop_event.is_set()

    def cancel(self) -> None:
        """Request shutdown; the current or next pause raises GenerationInterrupted."""
        self._stop_event.set()

    def pause(self, duration_ms: float) -> None:
        """Block for duration_ms * pause_scale milliseconds."""
        if self._stop_event.is_set():
            raise GenerationInterrupted("pause cancelled by shutdown request")
        seconds = duration_ms * self.pause_scale / 1000.0
        if seconds <= 0:
            return
        if self._stop_event.wait(seconds):
            raise GenerationInterrupted("pause cancelled by shutdown request")
