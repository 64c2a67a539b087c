from __future__ import annotations

from dataclasses import dataclass

import pytest

from tx_ledger.kernel.context import ContextFactory
from tx_ledger.kernel.runner import Runner
from tx_ledger.kernel.scenario import Scenario, StepSpec
from tx_ledger.kernel.trace import TraceRecorder


@dataclass(frozen=True, slots=True)
class _Input:
    value: int
    line_no: int = 0


class _CollectingTraceSink:
    def __init__(self) -> None:
        self.records: list[object] = []

    def emit(self, record: object) -> None:
        self.records.append(record)

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass


def _runner(*steps: StepSpec, **kwargs: object) -> Runner:
    scenario = Scenario(scenario_id="test", steps=list(steps))
    return Runner(scenario=scenario, context_factory=ContextFactory("run", "test"), **kwargs)  # type: ignore[arg-type]


def test_runner_processes_each_input_end_to_end_in_order() -> None:
    # Each input passes every step before the next input starts.
    seen: list[tuple[str, int]] = []

    def first(msg, ctx):
        seen.append(("first", msg.value))
        return [msg.value + 1]

    def second(msg, ctx):
        seen.append(("second", msg))
        return [msg]

    outputs: list[object] = []
    count = _runner(StepSpec("first", first), StepSpec("second", second)).run(
        [_Input(1), _Input(2)], output_sink=outputs.append
    )
    assert seen == [("first", 1), ("second", 2), ("first", 2), ("second", 3)]
    assert outputs == [2, 3]
    assert count == 2


def test_runner_fanout_ordering() -> None:
    collected: list[int] = []

    def fanout(msg, ctx):
        return [msg.value, msg.value + 1]

    def collect(msg, ctx):
        collected.append(msg)
        return [msg]

    _runner(StepSpec("fanout", fanout), StepSpec("collect", collect)).run([_Input(1)])
    assert collected == [1, 2]


def test_runner_drop_skips_later_steps() -> None:
    collected: list[object] = []

    def drop(msg, ctx):
        return []

    def collect(msg, ctx):
        collected.append(msg)
        return [msg]

    _runner(StepSpec("drop", drop), StepSpec("collect", collect)).run([_Input(1)])
    assert collected == []


def test_runner_context_carries_line_number() -> None:
    lines: list[int | None] = []

    def record(msg, ctx):
        lines.append(ctx.line_no)
        return []

    _runner(StepSpec("record", record)).run([_Input(1, line_no=5), _Input(2, line_no=9)])
    assert lines == [5, 9]


def test_runner_without_error_handler_propagates() -> None:
    def boom(msg, ctx):
        raise ValueError("boom")

    with pytest.raises(ValueError, match="boom"):
        _runner(StepSpec("boom", boom)).run([_Input(1)])


def test_runner_error_handler_can_continue() -> None:
    errors: list[str] = []
    collected: list[int] = []

    def maybe_boom(msg, ctx):
        if msg.value == 2:
            raise ValueError("boom")
        collected.append(msg.value)
        return []

    runner = _runner(
        StepSpec("maybe_boom", maybe_boom),
        on_error=lambda ctx, exc: errors.append(str(exc)),
    )
    assert runner.run([_Input(1), _Input(2), _Input(3)]) == 2
    assert errors == ["boom"]
    assert collected == [1, 3]


def test_runner_error_handler_can_abort() -> None:
    def boom(msg, ctx):
        raise ValueError("boom")

    def abort(ctx, exc):
        raise RuntimeError("aborted") from exc

    with pytest.raises(RuntimeError, match="aborted"):
        _runner(StepSpec("boom", boom), on_error=abort).run([_Input(1)])


def test_runner_emits_trace_record_per_step_invocation() -> None:
    sink = _CollectingTraceSink()

    def fanout(msg, ctx):
        return [msg.value, msg.value]

    def keep(msg, ctx):
        return [msg]

    runner = _runner(
        StepSpec("fanout", fanout),
        StepSpec("keep", keep),
        tracer=TraceRecorder(),
        trace_sink=sink,
    )
    runner.run([_Input(1)])
    names = [(r.step_name, r.work_index) for r in sink.records]  # type: ignore[attr-defined]
    assert names == [("fanout", 0), ("keep", 0), ("keep", 1)]


def test_runner_traces_failed_step_before_propagating() -> None:
    sink = _CollectingTraceSink()

    def boom(msg, ctx):
        raise ValueError("boom")

    runner = _runner(StepSpec("boom", boom), tracer=TraceRecorder(), trace_sink=sink)
    with pytest.raises(ValueError):
        runner.run([_Input(1)])
    (record,) = sink.records
    assert record.status == "error"  # type: ignore[attr-defined]
    assert record.error.type == "ValueError"  # type: ignore[attr-defined]
    assert record.error.where == "boom"  # type: ignore[attr-defined]
