from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .account import Account
from .messages import AccountSnapshot, TransactionRecord


@dataclass
class Ledger:
    # One Account per client id ever observed; dict order is first-seen order.
    _accounts: dict[int, Account] = field(default_factory=dict)

    def apply(self, tx: TransactionRecord) -> None:
        # Account errors propagate; the driver decides whether to skip or abort.
        account = self._accounts.get(tx.client_id)
        if account is None:
            account = Account(client_id=tx.client_id)
            self._accounts[tx.client_id] = account
        account.apply(tx)

    def get(self, client_id: int) -> Account | None:
        return self._accounts.get(client_id)

    def accounts(self) -> Iterator[AccountSnapshot]:
        for account in self._accounts.values():
            yield account.snapshot()

    def __len__(self) -> int:
        return len(self._accounts)
