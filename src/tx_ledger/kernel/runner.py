from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tx_ledger.kernel.context import Context, ContextFactory
from tx_ledger.kernel.scenario import Scenario
from tx_ledger.kernel.trace import ErrorInfo, TraceRecord, TraceRecorder

if TYPE_CHECKING:
    from tx_ledger.ports.trace_sink import TraceSink


class OutputSink(Protocol):
    # Runner output callback for messages left after the last step.
    def __call__(self, msg: object) -> None:
        raise NotImplementedError("Runner output sink is a callback")


def _discard(msg: object) -> None:
    _ = msg


@dataclass(frozen=True, slots=True)
class Runner:
    """Runs every input through the scenario depth-first, strictly in input order.

    A record is fully processed, including any ledger mutation, before the
    next one is pulled from ``inputs``. A step returning an empty list drops
    the record. Exceptions go to ``on_error`` when set (the handler re-raises
    to abort), otherwise they propagate. The return value counts records that
    passed every step; records absorbed by ``on_error`` are not included.
    """

    scenario: Scenario
    context_factory: ContextFactory
    on_error: Callable[[Context, Exception], None] | None = None
    tracer: TraceRecorder | None = None
    trace_sink: TraceSink | None = None

    def run(self, inputs: Iterable[object], *, output_sink: OutputSink = _discard) -> int:
        processed = 0
        for raw in inputs:
            ctx = self.context_factory.new(line_no=getattr(raw, "line_no", None))
            try:
                work = self._run_steps(raw, ctx)
            except Exception as exc:
                if self.on_error is None:
                    raise
                self.on_error(ctx, exc)
                continue

            for msg in work:
                output_sink(msg)
            processed += 1
        return processed

    def _run_steps(self, raw: object, ctx: Context) -> list[object]:
        work: list[object] = [raw]
        for step_index, step_spec in enumerate(self.scenario.steps):
            next_work: list[object] = []
            for work_index, msg in enumerate(work):
                next_work.extend(self._invoke(step_spec.name, step_index, work_index, step_spec.step, msg, ctx))
            work = next_work
            if not work:
                break
        return work

    def _invoke(
        self,
        step_name: str,
        step_index: int,
        work_index: int,
        step: Callable[[object, Context | None], Iterable[object]],
        msg: object,
        ctx: Context,
    ) -> list[object]:
        if self.tracer is None:
            return list(step(msg, ctx))

        span = self.tracer.begin(
            ctx=ctx,
            step_name=step_name,
            step_index=step_index,
            work_index=work_index,
            msg_in=msg,
        )
        try:
            out = list(step(msg, ctx))
        except Exception as exc:
            record = self.tracer.finish(
                ctx=ctx,
                span=span,
                msg_out=(),
                status="error",
                error=ErrorInfo.from_exception(exc, where=step_name),
            )
            self._emit(record)
            raise
        self._emit(self.tracer.finish(ctx=ctx, span=span, msg_out=out, status="ok", error=None))
        return out

    def _emit(self, record: TraceRecord) -> None:
        if self.trace_sink is not None:
            self.trace_sink.emit(record)
