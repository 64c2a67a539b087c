from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from tx_ledger.domain.messages import RawRow


# InputSource port defines how raw transaction rows enter the system.
@runtime_checkable
class InputSource(Protocol):
    def read(self) -> Iterable[RawRow]:
        """Yield RawRow records in input order."""
        # Port contract has no implementation; calling it directly is a wiring error.
        raise NotImplementedError("InputSource is a port; use a concrete adapter.")
