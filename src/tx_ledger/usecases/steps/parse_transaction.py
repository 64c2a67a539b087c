from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from tx_ledger.domain.errors import MalformedAmount, TransactionParseError
from tx_ledger.domain.fixed_decimal import FixedDecimal, parse_fixed_decimal
from tx_ledger.domain.messages import CLIENT_ID_MAX, TX_ID_MAX, RawRow, TransactionKind, TransactionRecord
from tx_ledger.domain.reasons import ReasonCode

_COLUMNS = ("type", "client", "tx", "amount")


class _RawTransaction(BaseModel):
    type: str
    client: str
    tx: str
    amount: str | None = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("amount")
    @classmethod
    def _empty_amount_is_absent(cls, value: str | None) -> str | None:
        # "dispute,1,7," leaves an empty trailing column; that is no amount, not zero.
        return value or None


class ParseTransaction:
    """Decodes one CSV row into a TransactionRecord.

    Any decode failure raises TransactionParseError; the row is never
    repaired or skipped here.
    """

    def __call__(self, msg: RawRow, ctx: object | None) -> list[TransactionRecord]:
        if len(msg.fields) > len(_COLUMNS):
            raise TransactionParseError(
                msg.line_no, ReasonCode.INPUT_PARSE_ERROR, f"expected at most {len(_COLUMNS)} columns"
            )

        try:
            raw = _RawTransaction.model_validate(dict(zip(_COLUMNS, msg.fields)))
        except ValidationError as exc:
            raise TransactionParseError(msg.line_no, ReasonCode.INPUT_PARSE_ERROR, "missing columns") from exc

        kind = _parse_kind(raw.type, msg.line_no)
        client_id = _parse_id(raw.client, CLIENT_ID_MAX, msg.line_no, "client")
        tx_id = _parse_id(raw.tx, TX_ID_MAX, msg.line_no, "tx")
        amount = _parse_amount(raw.amount, kind, msg.line_no)

        return [
            TransactionRecord(
                kind=kind,
                client_id=client_id,
                tx_id=tx_id,
                amount=amount,
                line_no=msg.line_no,
            )
        ]


_ID_PATTERN = re.compile(r"\d+", re.ASCII)


def _parse_kind(value: str, line_no: int) -> TransactionKind:
    # Labels are case-normalized before lookup.
    try:
        return TransactionKind(value.lower())
    except ValueError as exc:
        raise TransactionParseError(line_no, ReasonCode.UNKNOWN_TRANSACTION_TYPE, value) from exc


def _parse_id(value: str, upper: int, line_no: int, column: str) -> int:
    if not _ID_PATTERN.fullmatch(value) or len(value) > 20 or int(value) > upper:
        raise TransactionParseError(line_no, ReasonCode.INVALID_ID_FORMAT, f"{column}={value!r}")
    return int(value)


def _parse_amount(value: str | None, kind: TransactionKind, line_no: int) -> FixedDecimal | None:
    if not kind.carries_amount:
        if value is not None:
            raise TransactionParseError(line_no, ReasonCode.UNEXPECTED_AMOUNT, f"{kind.value} takes no amount")
        return None

    if value is None:
        raise TransactionParseError(line_no, ReasonCode.MISSING_AMOUNT, f"{kind.value} requires an amount")
    try:
        return parse_fixed_decimal(value)
    except MalformedAmount as exc:
        raise TransactionParseError(line_no, ReasonCode.INVALID_AMOUNT_FORMAT, value) from exc
