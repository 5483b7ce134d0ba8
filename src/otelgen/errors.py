"""Error kinds raised while generating telemetry."""

import traceback


class SyntheticError(RuntimeError):
    """Raised on purpose inside the emission sequence; always caught where it is raised."""


class GenerationInterrupted(Exception):
    """A pause was cancelled by a shutdown request. Fatal to the run loop."""


def exception_type_name(exc: BaseException) -> str:
    """Qualified class name of exc (builtins stay unqualified)."""
    cls = type(exc)
    if cls.__module__ == "builtins":
        return cls.__qualname__
    return f"{cls.__module__}.{cls.__qualname__}"


def exception_attributes(exc: BaseException) -> dict[str, str]:
    """exception.message / exception.type / exception.stacktrace per OTEL semantic conventions."""
    return {
        "exception.message": str(exc),
        "exception.type": exception_type_name(exc),
        "exception.stacktrace": "".join(
            traceback.format_exception(type(exc), exc, exc.__traceback__)
        ),
    }
