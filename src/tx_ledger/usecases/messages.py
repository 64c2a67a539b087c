from __future__ import annotations

from dataclasses import dataclass

OUTPUT_HEADER = "client,available,held,total,locked"


@dataclass(frozen=True, slots=True)
class OutputLine:
    # OutputLine is produced by FormatSnapshot; id is the client id of the row.
    id: int
    text: str
