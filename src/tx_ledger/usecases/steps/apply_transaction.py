from __future__ import annotations

from dataclasses import dataclass

from tx_ledger.domain.ledger import Ledger
from tx_ledger.domain.messages import TransactionRecord


@dataclass(frozen=True, slots=True)
class ApplyTransaction:
    # Terminal ingest step: mutates the ledger and emits nothing.
    ledger: Ledger

    def __call__(self, msg: TransactionRecord, ctx: object | None) -> list[object]:
        # InsufficientFunds propagates to the runner's error policy.
        self.ledger.apply(msg)
        return []
