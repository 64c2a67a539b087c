from __future__ import annotations

from .reasons import ReasonCode


class LedgerError(Exception):
    # Base class for every error raised by the ledger engine and its decoder.
    reason: ReasonCode = ReasonCode.INPUT_PARSE_ERROR


class MalformedAmount(LedgerError, ValueError):
    reason = ReasonCode.INVALID_AMOUNT_FORMAT

    def __init__(self, text: object) -> None:
        super().__init__(f"{self.reason.value}: {text!r}")
        self.text = text


class AmountUnderflow(LedgerError, ArithmeticError):
    # Raised instead of wrapping when a subtraction would go below zero.
    def __init__(self, minuend: object, subtrahend: object) -> None:
        super().__init__(f"cannot subtract {subtrahend} from {minuend}")
        self.minuend = minuend
        self.subtrahend = subtrahend


class InsufficientFunds(LedgerError):
    """Withdrawal exceeds the client's available balance."""

    reason = ReasonCode.INSUFFICIENT_FUNDS

    def __init__(self, client_id: int, tx_id: int) -> None:
        super().__init__(f"insufficient funds: client={client_id} tx={tx_id}")
        self.client_id = client_id
        self.tx_id = tx_id


class MissingAmount(LedgerError, ValueError):
    reason = ReasonCode.MISSING_AMOUNT

    def __init__(self, client_id: int, tx_id: int) -> None:
        super().__init__(f"amount required: client={client_id} tx={tx_id}")
        self.client_id = client_id
        self.tx_id = tx_id


class TransactionParseError(LedgerError, ValueError):
    """A CSV row could not be decoded into a TransactionRecord."""

    def __init__(self, line_no: int | None, reason: ReasonCode, detail: str = "") -> None:
        message = f"line {line_no}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.line_no = line_no
        self.reason = reason
        self.detail = detail
