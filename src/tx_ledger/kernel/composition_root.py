from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from tx_ledger.adapters.trace_sinks import JsonlTraceSink, StderrTraceSink
from tx_ledger.domain.ledger import Ledger
from tx_ledger.domain.messages import RawRow
from tx_ledger.kernel.context import ContextFactory
from tx_ledger.kernel.runner import Runner
from tx_ledger.kernel.scenario_builder import ScenarioBuilder
from tx_ledger.kernel.trace import TraceRecorder
from tx_ledger.ports.output_sink import OutputSink
from tx_ledger.ports.trace_sink import TraceSink
from tx_ledger.usecases.config_models import AppConfig, StepDecl, TracingConfig
from tx_ledger.usecases.error_policy import InsufficientFundsPolicy
from tx_ledger.usecases.messages import OUTPUT_HEADER
from tx_ledger.usecases.wiring import build_step_registry


@dataclass(frozen=True, slots=True)
class AppRuntime:
    """Runners for the two phases of a run, sharing one Ledger.

    ``ingest`` applies every input row; ``report`` renders the final
    account snapshots. Nothing is written before ingestion completes, so an
    aborted run produces no partial snapshot.
    """

    ledger: Ledger
    ingest: Runner
    report: Runner
    output_sink: OutputSink
    write_header: bool = True
    trace_sink: TraceSink | None = None

    def run(self, rows: Iterable[RawRow]) -> int:
        processed = self.ingest.run(rows)
        if self.write_header:
            self.output_sink.write_line(OUTPUT_HEADER)
        self.report.run(self.ledger.accounts())
        return processed

    def close(self) -> None:
        self.output_sink.close()
        if self.trace_sink is not None:
            self.trace_sink.close()


def build_runtime(
    *,
    config: AppConfig,
    wiring: dict[str, object],
    run_id: str = "run",
) -> AppRuntime:
    # wiring must provide output_sink; ledger and trace_sink are built when absent.
    ledger = wiring.get("ledger")
    if ledger is None:
        ledger = Ledger()
    if not isinstance(ledger, Ledger):
        raise TypeError("wiring['ledger'] must be a Ledger")
    output_sink = wiring.get("output_sink")
    if not isinstance(output_sink, OutputSink):
        raise KeyError("Missing wiring dependency: output_sink")
    wiring = {**wiring, "ledger": ledger}

    tracer, trace_sink = _build_tracing(config.tracing, wiring.get("trace_sink"))
    registry = build_step_registry(wiring)
    builder = ScenarioBuilder(registry)
    scenario_name = config.scenario.name

    ingest = Runner(
        scenario=builder.build(
            scenario_id=f"{scenario_name}.ingest",
            steps=_step_dicts(config.pipeline.ingest),
            wiring=wiring,
        ),
        context_factory=ContextFactory(run_id, f"{scenario_name}.ingest"),
        on_error=InsufficientFundsPolicy(config.ledger.on_insufficient_funds),
        tracer=tracer,
        trace_sink=trace_sink,
    )
    report = Runner(
        scenario=builder.build(
            scenario_id=f"{scenario_name}.report",
            steps=_step_dicts(config.pipeline.report),
            wiring=wiring,
        ),
        context_factory=ContextFactory(run_id, f"{scenario_name}.report"),
        tracer=tracer,
        trace_sink=trace_sink,
    )
    return AppRuntime(
        ledger=ledger,
        ingest=ingest,
        report=report,
        output_sink=output_sink,
        write_header=config.output.write_header,
        trace_sink=trace_sink,
    )


def _step_dicts(steps: Iterable[StepDecl]) -> list[dict[str, object]]:
    return [{"name": step.name, "config": step.config} for step in steps]


def _build_tracing(
    tracing: TracingConfig | None,
    provided_sink: object | None,
) -> tuple[TraceRecorder | None, TraceSink | None]:
    if tracing is None or not tracing.enabled:
        return None, None

    tracer = TraceRecorder(signature_mode=tracing.signature.mode)
    if isinstance(provided_sink, TraceSink):
        return tracer, provided_sink
    sink_cfg = tracing.sink
    if sink_cfg is None:
        # Records still land on ctx.trace without a sink.
        return tracer, None
    if sink_cfg.kind == "jsonl":
        assert sink_cfg.jsonl is not None
        return tracer, JsonlTraceSink(
            path=Path(sink_cfg.jsonl.path),
            write_mode=sink_cfg.jsonl.write_mode,
            flush_every_n=sink_cfg.jsonl.flush_every_n,
            fsync_every_n=sink_cfg.jsonl.fsync_every_n,
        )
    return tracer, StderrTraceSink()
