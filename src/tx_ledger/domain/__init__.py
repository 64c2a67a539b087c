from .account import Account
from .errors import (
    AmountUnderflow,
    InsufficientFunds,
    LedgerError,
    MalformedAmount,
    MissingAmount,
    TransactionParseError,
)
from .fixed_decimal import FixedDecimal, format_fixed_decimal, parse_fixed_decimal
from .ledger import Ledger
from .messages import AccountSnapshot, RawRow, TransactionKind, TransactionRecord
from .reasons import ReasonCode

# Public domain exports keep imports explicit across layers.
__all__ = [
    "Account",
    "AccountSnapshot",
    "AmountUnderflow",
    "FixedDecimal",
    "InsufficientFunds",
    "Ledger",
    "LedgerError",
    "MalformedAmount",
    "MissingAmount",
    "RawRow",
    "ReasonCode",
    "TransactionKind",
    "TransactionParseError",
    "TransactionRecord",
    "format_fixed_decimal",
    "parse_fixed_decimal",
]
