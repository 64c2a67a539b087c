from __future__ import annotations

import csv
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from tx_ledger.domain.errors import TransactionParseError
from tx_ledger.domain.messages import RawRow
from tx_ledger.domain.reasons import ReasonCode
from tx_ledger.ports.input_source import InputSource


@dataclass(frozen=True, slots=True)
class CsvInputSource(InputSource):
    """Streams a transactions CSV file row by row.

    Fields are trimmed, rows may be short (dispute rows usually omit the
    amount column) and blank lines are skipped. With ``has_headers`` the first
    non-blank row is treated as the header and not yielded.
    """

    path: Path
    has_headers: bool = True
    encoding: str = "utf-8"

    def read(self) -> Iterable[RawRow]:
        # newline="" lets the csv module handle line endings itself.
        with self.path.open("r", encoding=self.encoding, newline="") as handle:
            header_pending = self.has_headers
            reader = csv.reader(handle)
            try:
                for fields in reader:
                    trimmed = tuple(field.strip() for field in fields)
                    if not any(trimmed):
                        continue
                    if header_pending:
                        header_pending = False
                        continue
                    yield RawRow(line_no=reader.line_num, fields=trimmed)
            except UnicodeDecodeError as exc:
                # Text is decoded in chunks, so the line is the last one fully read.
                raise TransactionParseError(
                    reader.line_num, ReasonCode.INPUT_PARSE_ERROR, f"not valid {self.encoding} text"
                ) from exc
            except csv.Error as exc:
                raise TransactionParseError(reader.line_num, ReasonCode.INPUT_PARSE_ERROR, str(exc)) from exc
