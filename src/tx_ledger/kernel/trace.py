from __future__ import annotations

import dataclasses
import hashlib
import json
import traceback
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from tx_ledger.kernel.context import Context

SignatureMode = Literal["type_only", "type_and_identity", "hash"]


@dataclass(frozen=True, slots=True)
class MessageSignature:
    # Message type plus optional identity (transaction or client id) and content hash.
    type_name: str
    identity: str | None
    hash: str | None


@dataclass(frozen=True, slots=True)
class ErrorInfo:
    type: str
    message: str
    where: str
    stack: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException, *, where: str, with_stack: bool = False) -> ErrorInfo:
        stack = "".join(traceback.format_exception(exc)) if with_stack else None
        return cls(type=type(exc).__name__, message=str(exc), where=where, stack=stack)


@dataclass(frozen=True, slots=True)
class TraceRecord:
    # One step invocation for one message.
    trace_id: str
    scenario: str
    line_no: int | None
    step_index: int
    step_name: str
    work_index: int
    t_enter: datetime
    t_exit: datetime
    duration_ms: float
    msg_in: MessageSignature
    msg_out: tuple[MessageSignature, ...]
    msg_out_count: int
    status: Literal["ok", "error"]
    error: ErrorInfo | None


@dataclass(frozen=True, slots=True)
class TraceSpan:
    # Handle carried between step enter and exit.
    step_name: str
    step_index: int
    work_index: int
    msg_in: MessageSignature
    t_enter: datetime


class TraceRecorder:
    """Builds TraceRecords for step invocations and appends them to ``ctx.trace``."""

    def __init__(self, *, signature_mode: SignatureMode = "type_only") -> None:
        self._signature_mode = signature_mode

    def begin(
        self,
        *,
        ctx: Context,
        step_name: str,
        step_index: int,
        work_index: int,
        msg_in: object,
    ) -> TraceSpan:
        return TraceSpan(
            step_name=step_name,
            step_index=step_index,
            work_index=work_index,
            msg_in=self.signature(msg_in),
            t_enter=datetime.now(tz=UTC),
        )

    def finish(
        self,
        *,
        ctx: Context,
        span: TraceSpan,
        msg_out: Iterable[object],
        status: Literal["ok", "error"],
        error: ErrorInfo | None,
    ) -> TraceRecord:
        t_exit = datetime.now(tz=UTC)
        out_signatures = tuple(self.signature(item) for item in msg_out)
        record = TraceRecord(
            trace_id=ctx.trace_id,
            scenario=ctx.scenario_id,
            line_no=ctx.line_no,
            step_index=span.step_index,
            step_name=span.step_name,
            work_index=span.work_index,
            t_enter=span.t_enter,
            t_exit=t_exit,
            duration_ms=(t_exit - span.t_enter).total_seconds() * 1000.0,
            msg_in=span.msg_in,
            msg_out=out_signatures,
            msg_out_count=len(out_signatures),
            status=status,
            error=error,
        )
        ctx.trace.append(record)
        return record

    def signature(self, msg: object) -> MessageSignature:
        identity = None
        digest = None
        if self._signature_mode in {"type_and_identity", "hash"}:
            identity = _extract_identity(msg)
        if self._signature_mode == "hash":
            digest = _hash_message(msg)
        return MessageSignature(type_name=type(msg).__name__, identity=identity, hash=digest)


def _extract_identity(msg: object) -> str | None:
    # Records expose "id" (tx id for transactions, client id for snapshots).
    value = getattr(msg, "id", None)
    return None if value is None else str(value)


def _hash_message(msg: object) -> str:
    snapshot = dataclasses.asdict(msg) if dataclasses.is_dataclass(msg) else {"value": str(msg)}
    encoded = json.dumps(snapshot, sort_keys=True, separators=(",", ":"), default=json_default)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def json_default(obj: object) -> object:
    # Fallback for datetimes, enums and anything else non-JSON.
    if isinstance(obj, datetime):
        return obj.astimezone(UTC).isoformat().replace("+00:00", "Z")
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)
