from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from tx_ledger.adapters.input_source import CsvInputSource
from tx_ledger.adapters.output_sink import FileOutputSink, StdoutOutputSink
from tx_ledger.config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from tx_ledger.domain.errors import LedgerError
from tx_ledger.kernel.composition_root import build_runtime
from tx_ledger.kernel.scenario_builder import InvalidScenarioConfigError, StepBuildError
from tx_ledger.kernel.step_registry import UnknownStepError
from tx_ledger.ports.output_sink import OutputSink
from tx_ledger.usecases.config_models import (
    AppConfig,
    TraceSignatureConfig,
    TraceSinkConfig,
    TraceSinkJsonlConfig,
    TracingConfig,
)

logger = logging.getLogger(__name__)

# Thin wrapper around composition root wiring; ledger semantics live in domain/.


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tx-ledger",
        description="Apply a transactions CSV to client accounts and print the final balances",
    )
    parser.add_argument("input", help="Path to the transactions CSV file")
    parser.add_argument("--config", help="Path to YAML config (defaults to the bundled baseline)")
    parser.add_argument("--output", help="Write the snapshot to this file instead of stdout")
    parser.add_argument(
        "--tracing",
        choices=["enable", "disable"],
        help="Override tracing enabled flag",
    )
    parser.add_argument("--trace-path", help="Write trace records as JSONL to this path")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Diagnostics level on stderr",
    )
    return parser


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    # Caller passes argv for testability; wrong arity exits with a usage error.
    return build_parser().parse_args(argv)


def apply_tracing_overrides(config: AppConfig, args: argparse.Namespace) -> None:
    # CLI overrides take precedence over config.
    if args.tracing is None and args.trace_path is None:
        return

    tracing = config.tracing
    if tracing is None:
        # When missing, create a minimal tracing config so overrides have a target.
        tracing = TracingConfig(enabled=False, signature=TraceSignatureConfig(), sink=None)
        config.tracing = tracing

    if args.tracing is not None:
        tracing.enabled = args.tracing == "enable"

    if args.trace_path is not None:
        if tracing.sink is None or tracing.sink.kind != "jsonl":
            tracing.sink = TraceSinkConfig(kind="jsonl", jsonl=TraceSinkJsonlConfig(path=args.trace_path))
        else:
            assert tracing.sink.jsonl is not None
            tracing.sink.jsonl.path = args.trace_path


def apply_output_override(config: AppConfig, args: argparse.Namespace) -> None:
    if args.output is not None:
        config.output.file_path = args.output


def configure_logging(level: str) -> None:
    # Diagnostics go to stderr; stdout carries only the snapshot.
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(Path(args.config) if args.config else DEFAULT_CONFIG_PATH)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    apply_tracing_overrides(config, args)
    apply_output_override(config, args)

    input_source = CsvInputSource(
        Path(args.input),
        has_headers=config.input.has_headers,
        encoding=config.input.encoding,
    )
    output_sink: OutputSink
    if config.output.file_path is None:
        output_sink = StdoutOutputSink()
    else:
        output_sink = FileOutputSink(Path(config.output.file_path), atomic_replace=config.output.atomic_replace)

    try:
        runtime = build_runtime(config=config, wiring={"output_sink": output_sink}, run_id="cli")
    except (UnknownStepError, InvalidScenarioConfigError, StepBuildError, OSError) as exc:
        # Config passed validation but the pipeline cannot be assembled.
        output_sink.close()
        print(f"error: {_describe(exc)}", file=sys.stderr)
        return 1

    try:
        processed = runtime.run(input_source.read())
    except (LedgerError, OSError) as exc:
        # Early termination: diagnostic only, no partial snapshot.
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        runtime.close()

    logger.info("Applied %d rows to %d accounts", processed, len(runtime.ledger))
    return 0


def _describe(exc: Exception) -> str:
    # KeyError renders only the quoted key.
    if isinstance(exc, UnknownStepError):
        return f"unknown step {exc}"
    return str(exc)
