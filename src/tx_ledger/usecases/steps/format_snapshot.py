from __future__ import annotations

from tx_ledger.domain.messages import AccountSnapshot
from tx_ledger.usecases.messages import OutputLine


class FormatSnapshot:
    # Column order matches OUTPUT_HEADER: client,available,held,total,locked.
    def __call__(self, msg: AccountSnapshot, ctx: object | None) -> list[OutputLine]:
        locked = "true" if msg.locked else "false"
        text = f"{msg.client_id},{msg.available},{msg.held},{msg.total},{locked}"
        return [OutputLine(id=msg.client_id, text=text)]
