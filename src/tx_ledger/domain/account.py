from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import InsufficientFunds, MissingAmount
from .fixed_decimal import FixedDecimal
from .messages import AccountSnapshot, TransactionKind, TransactionRecord

logger = logging.getLogger(__name__)


@dataclass
class Account:
    """Balances and dispute bookkeeping for a single client.

    ``tx_amounts`` is the audit trail of deposit/withdrawal amounts keyed by
    transaction id, so a dispute reverses exactly what was recorded no matter
    how the balance moved afterwards. ``disputed`` holds the ids whose
    amount currently sits in ``held``.

    Only a withdrawal exceeding ``available`` raises; every other anomaly is
    absorbed as a no-op. Once locked by a chargeback the account ignores all
    further transactions.
    """

    client_id: int
    available: FixedDecimal = FixedDecimal.ZERO
    held: FixedDecimal = FixedDecimal.ZERO
    locked: bool = False
    tx_amounts: dict[int, FixedDecimal] = field(default_factory=dict, repr=False)
    disputed: set[int] = field(default_factory=set, repr=False)

    @property
    def total(self) -> FixedDecimal:
        return self.available + self.held

    def apply(self, tx: TransactionRecord) -> None:
        if self.locked:
            _ignored(tx, "account locked")
            return

        if tx.kind is TransactionKind.DEPOSIT:
            self._deposit(tx)
        elif tx.kind is TransactionKind.WITHDRAWAL:
            self._withdraw(tx)
        elif tx.kind is TransactionKind.DISPUTE:
            self._dispute(tx)
        elif tx.kind is TransactionKind.RESOLVE:
            self._resolve(tx)
        elif tx.kind is TransactionKind.CHARGEBACK:
            self._chargeback(tx)
        else:
            raise ValueError(f"Unsupported transaction kind: {tx.kind!r}")

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )

    def _deposit(self, tx: TransactionRecord) -> None:
        amount = self._require_amount(tx)
        if tx.tx_id in self.tx_amounts:
            _ignored(tx, "duplicate transaction id")
            return
        self.tx_amounts[tx.tx_id] = amount
        self.available = self.available + amount

    def _withdraw(self, tx: TransactionRecord) -> None:
        amount = self._require_amount(tx)
        if tx.tx_id in self.tx_amounts:
            _ignored(tx, "duplicate transaction id")
            return
        if amount > self.available:
            raise InsufficientFunds(self.client_id, tx.tx_id)
        self.tx_amounts[tx.tx_id] = amount
        self.available = self.available - amount

    def _dispute(self, tx: TransactionRecord) -> None:
        if tx.tx_id in self.disputed:
            _ignored(tx, "already disputed")
            return
        amount = self.tx_amounts.get(tx.tx_id)
        if amount is None:
            # Not marked disputed: a later deposit reusing the id must not arrive already under dispute.
            _ignored(tx, "unknown transaction")
            return
        # Held funds must come out of available; a shortfall leaves the dispute unopened.
        if amount > self.available:
            _ignored(tx, "disputed amount exceeds available")
            return
        self.disputed.add(tx.tx_id)
        self.available = self.available - amount
        self.held = self.held + amount

    def _resolve(self, tx: TransactionRecord) -> None:
        amount = self._close_dispute(tx)
        if amount is None:
            return
        self.held = self.held - amount
        self.available = self.available + amount

    def _chargeback(self, tx: TransactionRecord) -> None:
        amount = self._close_dispute(tx)
        if amount is None:
            return
        self.held = self.held - amount
        self.locked = True
        logger.info("Account %s locked by chargeback of tx %s", self.client_id, tx.tx_id)

    def _close_dispute(self, tx: TransactionRecord) -> FixedDecimal | None:
        if tx.tx_id not in self.disputed:
            _ignored(tx, "not under dispute")
            return None
        self.disputed.discard(tx.tx_id)
        amount = self.tx_amounts.get(tx.tx_id)
        if amount is None:
            _ignored(tx, "unknown transaction")
        return amount

    def _require_amount(self, tx: TransactionRecord) -> FixedDecimal:
        if tx.amount is None:
            raise MissingAmount(self.client_id, tx.tx_id)
        return tx.amount


def _ignored(tx: TransactionRecord, why: str) -> None:
    logger.debug("Ignored %s client=%s tx=%s: %s", tx.kind.value, tx.client_id, tx.tx_id, why)
