"""
Command-line interface for the synthetic telemetry generator.

`otelgen` with no arguments runs the reference loop (6000 iterations, 1s apart)
against an OTLP collector on localhost. Flags and OTELGEN_* / OTEL_* environment
variables tune the run; see `otelgen run --help`.
"""

import argparse
import logging
import signal
import sys

from .defaults import get_run_settings
from .emission import Emission
from .errors import GenerationInterrupted
from .exporters import (
    ExporterSet,
    create_console_exporters,
    create_file_exporters,
    create_otlp_exporters,
)
from .exporters.otlp_exporter import PROTOCOLS
from .pacing import Pacer
from .pipeline import TelemetryPipeline, build_resource
from .runner import GenerationRunner


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    settings = get_run_settings()
    parser = argparse.ArgumentParser(
        prog="otelgen",
        description="Synthetic OpenTelemetry trace, log and metric generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reference run to a local OTLP collector
  otelgen

  # Ten fast iterations printed to the console
  otelgen run --iterations 10 --pause-scale 0 --console

  # Export to JSONL files instead of OTLP
  otelgen run --iterations 1 --pause-scale 0 --output-file out/spans.jsonl
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    run_parser = subparsers.add_parser("run", help="Run the generation loop (default)")
    # Root parser carries the defaults so `otelgen --iterations 3` works without the
    # subcommand; the subcommand only overrides what is given after `run`.
    _add_run_arguments(parser, settings, on_subcommand=False)
    _add_run_arguments(run_parser, settings, on_subcommand=True)
    return parser


def _add_run_arguments(parser: argparse.ArgumentParser, settings, on_subcommand: bool):
    def help_(text: str) -> str:
        return text if on_subcommand else argparse.SUPPRESS

    def default(value):
        return argparse.SUPPRESS if on_subcommand else value

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=default(False),
        help=help_("Enable debug logging"),
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=default(settings.iterations),
        help=help_(f"Number of loop iterations (default: {settings.iterations})"),
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=default(settings.interval_ms),
        help=help_(f"Pause between iterations in ms (default: {settings.interval_ms:g})"),
    )
    parser.add_argument(
        "--pause-scale",
        type=float,
        default=default(settings.pause_scale),
        help=help_("Multiplier for every simulated-work pause; 0 disables pauses"),
    )
    parser.add_argument(
        "--endpoint",
        type=str,
        default=default(settings.endpoint),
        help=help_(f"OTLP endpoint (default: {settings.endpoint})"),
    )
    parser.add_argument(
        "--protocol",
        choices=PROTOCOLS,
        default=default("http"),
        help=help_("OTLP protocol (default: http)"),
    )
    parser.add_argument(
        "--service-name",
        type=str,
        default=default(settings.service_name),
        help=help_(f"service.name resource attribute (default: {settings.service_name})"),
    )
    parser.add_argument(
        "--output-file",
        type=str,
        default=default(None),
        help=help_("Write JSONL files instead of exporting over OTLP"),
    )
    parser.add_argument(
        "--console",
        action="store_true",
        default=default(False),
        help=help_("Print telemetry to stdout instead of exporting over OTLP"),
    )
    parser.add_argument(
        "--no-metrics",
        action="store_true",
        default=default(False),
        help=help_("Disable metrics"),
    )
    parser.add_argument(
        "--no-logs",
        action="store_true",
        default=default(False),
        help=help_("Disable log records"),
    )
    parser.add_argument(
        "--show-emissions",
        action="store_true",
        default=default(False),
        help=help_("Print every emitted span, log record and metric observation"),
    )
    parser.add_argument(
        "--no-global",
        action="store_true",
        default=default(False),
        help=help_("Do not register the SDK providers as the global OTEL providers"),
    )


def _create_exporters(args: argparse.Namespace) -> ExporterSet:
    metrics_on = not args.no_metrics
    logs_on = not args.no_logs
    if args.output_file:
        print(f"   Output: {args.output_file}")
        return create_file_exporters(args.output_file, metrics_on, logs_on)
    if args.console:
        print("   Output: console")
        return create_console_exporters(metrics_on, logs_on)
    print(f"   Output: OTLP/{args.protocol} {args.endpoint}")
    return create_otlp_exporters(args.endpoint, args.protocol, metrics_on, logs_on)


def _print_emission(emission: Emission) -> None:
    unit = f" [{emission.unit_of_work}]" if emission.unit_of_work else ""
    print(f"   {emission.signal.value:<6} {emission.name}{unit}")


def cmd_run(args: argparse.Namespace) -> None:
    """Run the generation loop."""
    print("Starting synthetic telemetry generation...")
    print(f"   Iterations: {args.iterations}")
    print(f"   Interval: {args.interval:g}ms")
    print(f"   Pause scale: {args.pause_scale:g}")
    print(f"   Service: {args.service_name}")

    pipeline = TelemetryPipeline(
        _create_exporters(args),
        resource=build_resource(args.service_name),
    )
    if not args.no_global:
        pipeline.install_global()
    print()

    runner = GenerationRunner(
        pipeline,
        pacer=Pacer(args.pause_scale),
        listener=_print_emission if args.show_emissions else None,
        emit_logs=not args.no_logs,
        emit_metrics=not args.no_metrics,
    )

    def handle_sigterm(signum, frame):
        runner.stop()

    signal.signal(signal.SIGTERM, handle_sigterm)

    def progress_callback(current: int, total: int):
        if args.show_emissions or current % 10 == 0 or current == total:
            print(f"   Iterations completed: {current}/{total}")

    try:
        completed = runner.run(args.iterations, args.interval, progress_callback)
    except (KeyboardInterrupt, GenerationInterrupted):
        print("\nGeneration interrupted")
        sys.exit(1)
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
    finally:
        runner.shutdown()

    print()
    print(f"Completed {completed} iterations")


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.iterations < 0 or args.interval < 0 or args.pause_scale < 0:
        parser.error("--iterations, --interval and --pause-scale must be non-negative")

    if args.command in (None, "run"):
        cmd_run(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
