from __future__ import annotations

from enum import Enum


# Stable reason codes attached to decode and ledger failures.
class ReasonCode(str, Enum):
    INPUT_PARSE_ERROR = "INPUT_PARSE_ERROR"
    INVALID_AMOUNT_FORMAT = "INVALID_AMOUNT_FORMAT"
    INVALID_ID_FORMAT = "INVALID_ID_FORMAT"
    UNKNOWN_TRANSACTION_TYPE = "UNKNOWN_TRANSACTION_TYPE"
    MISSING_AMOUNT = "MISSING_AMOUNT"
    UNEXPECTED_AMOUNT = "UNEXPECTED_AMOUNT"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
