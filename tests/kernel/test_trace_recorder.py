from __future__ import annotations

from datetime import UTC, datetime

from tx_ledger.domain.fixed_decimal import FixedDecimal
from tx_ledger.domain.messages import TransactionKind, TransactionRecord
from tx_ledger.kernel.context import Context
from tx_ledger.kernel.trace import TraceRecorder


def _context() -> Context:
    return Context(
        trace_id="trace-1",
        run_id="run-1",
        scenario_id="baseline.ingest",
        line_no=4,
        received_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


def _record() -> TransactionRecord:
    return TransactionRecord(TransactionKind.DEPOSIT, 1, 77, FixedDecimal(1, 5))


def test_trace_record_has_required_fields() -> None:
    ctx = _context()
    recorder = TraceRecorder()
    span = recorder.begin(ctx=ctx, step_name="apply_transaction", step_index=1, work_index=0, msg_in=_record())
    record = recorder.finish(ctx=ctx, span=span, msg_out=[], status="ok", error=None)
    assert record.step_name == "apply_transaction"
    assert record.scenario == "baseline.ingest"
    assert record.trace_id == "trace-1"
    assert record.line_no == 4
    assert record.msg_out_count == 0
    assert record.duration_ms >= 0
    assert ctx.trace[-1] is record


def test_type_only_signature_omits_identity_and_hash() -> None:
    signature = TraceRecorder(signature_mode="type_only").signature(_record())
    assert signature.type_name == "TransactionRecord"
    assert signature.identity is None
    assert signature.hash is None


def test_identity_signature_uses_transaction_id() -> None:
    signature = TraceRecorder(signature_mode="type_and_identity").signature(_record())
    assert signature.identity == "77"
    assert signature.hash is None


def test_hash_signature_is_deterministic() -> None:
    recorder = TraceRecorder(signature_mode="hash")
    first = recorder.signature(_record())
    second = recorder.signature(_record())
    other = recorder.signature(TransactionRecord(TransactionKind.DEPOSIT, 1, 77, FixedDecimal(1, 6)))
    assert first.hash is not None
    assert first.hash == second.hash
    assert first.hash != other.hash


def test_identity_absent_for_plain_values() -> None:
    signature = TraceRecorder(signature_mode="type_and_identity").signature("text")
    assert signature.identity is None
