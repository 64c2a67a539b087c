from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from tx_ledger.ports.output_sink import OutputSink


@dataclass
class FileOutputSink(OutputSink):
    path: Path
    atomic_replace: bool = False
    _handle: TextIO | None = field(default=None, init=False, repr=False)
    _temp_path: Path | None = field(default=None, init=False, repr=False)

    def write_line(self, line: str) -> None:
        # Open lazily so construction does not touch the filesystem.
        if self._handle is None:
            self._open()
        assert self._handle is not None
        self._handle.write(line + "\n")

    def close(self) -> None:
        # Idempotent.
        if self._handle is None:
            return
        self._handle.flush()
        self._handle.close()
        self._handle = None

        if self.atomic_replace and self._temp_path is not None:
            self._temp_path.replace(self.path)
            self._temp_path = None

    def _open(self) -> None:
        if self.atomic_replace:
            self._temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            self._handle = self._temp_path.open("w", encoding="utf-8", newline="")
        else:
            self._handle = self.path.open("w", encoding="utf-8", newline="")


@dataclass
class StdoutOutputSink(OutputSink):
    # Writes to the stream current at write time so test capture works.
    stream: TextIO | None = None

    def write_line(self, line: str) -> None:
        (self.stream or sys.stdout).write(line + "\n")

    def close(self) -> None:
        (self.stream or sys.stdout).flush()
