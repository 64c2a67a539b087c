from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .fixed_decimal import FixedDecimal

CLIENT_ID_MAX = 2**16 - 1
TX_ID_MAX = 2**32 - 1


class TransactionKind(str, Enum):
    # Labels match the lower snake case "type" column of the input CSV.
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionKind.DEPOSIT, TransactionKind.WITHDRAWAL)


@dataclass(frozen=True, slots=True)
class RawRow:
    # RawRow preserves input order via line_no; fields are already trimmed.
    line_no: int
    fields: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    kind: TransactionKind
    client_id: int
    tx_id: int
    amount: FixedDecimal | None = None
    line_no: int | None = None

    @property
    def id(self) -> int:
        # Trace identity.
        return self.tx_id


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    # Immutable read model of one account at report time.
    client_id: int
    available: FixedDecimal
    held: FixedDecimal
    total: FixedDecimal
    locked: bool

    @property
    def id(self) -> int:
        return self.client_id
