from __future__ import annotations

from typing import Any

from tx_ledger.kernel.step_registry import StepRegistry
from tx_ledger.usecases.steps import ApplyTransaction, FormatSnapshot, ParseTransaction, WriteOutput


def build_step_registry(wiring: dict[str, object]) -> StepRegistry:
    # Step registry is built from wiring; per-step config is passed by the scenario builder.
    registry = StepRegistry()
    registry.register("parse_transaction", lambda cfg, w: ParseTransaction())
    registry.register("apply_transaction", lambda cfg, w: ApplyTransaction(ledger=_require(w, "ledger")))
    registry.register("format_snapshot", lambda cfg, w: FormatSnapshot())
    registry.register("write_output", lambda cfg, w: WriteOutput(output_sink=_require(w, "output_sink")))
    return registry


def _require(wiring: dict[str, object], key: str) -> Any:
    # Wiring must provide required ports; raise KeyError to fail fast.
    if key not in wiring:
        raise KeyError(f"Missing wiring dependency: {key}")
    return wiring[key]
