from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime


@dataclass(frozen=True, slots=True)
class CtxError:
    # Structured record of an error handled for one input row.
    code: str
    message: str
    step: str | None = None
    details: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class Context:
    # Context is mutable runtime metadata for one input record (not ledger state).
    trace_id: str
    run_id: str
    scenario_id: str
    line_no: int | None
    received_at: datetime
    errors: list[CtxError] = field(default_factory=list)
    trace: list[object] = field(default_factory=list)

    def error(
        self,
        code: str,
        message: str,
        *,
        step: str | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        self.errors.append(
            CtxError(
                code=code,
                message=message,
                step=step,
                details={} if details is None else details,
            )
        )


@dataclass(frozen=True, slots=True)
class ContextFactory:
    run_id: str
    scenario_id: str

    def new(self, *, line_no: int | None = None) -> Context:
        # Trace id is generated per record.
        return Context(
            trace_id=uuid.uuid4().hex,
            run_id=self.run_id,
            scenario_id=self.scenario_id,
            line_no=line_no,
            received_at=datetime.now(tz=UTC),
        )
