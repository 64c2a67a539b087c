from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from tx_ledger.domain.errors import InsufficientFunds
from tx_ledger.kernel.context import Context

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InsufficientFundsPolicy:
    """Runner error handler deciding the fate of a rejected withdrawal.

    ``skip`` records the rejection on the context, logs it and lets the run
    continue with balances unchanged; ``abort`` re-raises. Every other
    exception (decode errors included) is re-raised.
    """

    mode: Literal["skip", "abort"] = "skip"

    def __call__(self, ctx: Context, exc: Exception) -> None:
        if not isinstance(exc, InsufficientFunds) or self.mode == "abort":
            raise exc
        ctx.error(
            exc.reason.value,
            str(exc),
            step="apply_transaction",
            details={"client_id": exc.client_id, "tx_id": exc.tx_id},
        )
        logger.warning(
            "Skipped withdrawal on line %s: client=%s tx=%s exceeds available funds",
            ctx.line_no,
            exc.client_id,
            exc.tx_id,
        )
