from __future__ import annotations

import json
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TextIO

from tx_ledger.kernel.trace import json_default
from tx_ledger.ports.trace_sink import TraceSink

if TYPE_CHECKING:
    from tx_ledger.kernel.trace import TraceRecord


class JsonlTraceSink(TraceSink):
    # One TraceRecord per line, appended to the file.
    def __init__(
        self,
        *,
        path: Path,
        write_mode: Literal["line", "batch"] = "line",
        flush_every_n: int = 1,
        fsync_every_n: int | None = None,
    ) -> None:
        self._path = path
        self._write_mode = write_mode
        self._flush_every_n = max(1, flush_every_n)
        self._fsync_every_n = fsync_every_n
        self._emit_count = 0
        self._buffer: list[str] = []
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle: TextIO | None = self._path.open("a", encoding="utf-8")

    def emit(self, record: TraceRecord) -> None:
        line = trace_to_json(record)
        self._emit_count += 1
        if self._write_mode == "batch":
            self._buffer.append(line)
            if len(self._buffer) >= self._flush_every_n:
                self.flush()
        else:
            self._require_handle().write(line + "\n")
            if self._emit_count % self._flush_every_n == 0:
                self.flush()
        if self._fsync_every_n and self._emit_count % self._fsync_every_n == 0:
            self.flush()
            os.fsync(self._require_handle().fileno())

    def flush(self) -> None:
        handle = self._require_handle()
        for line in self._buffer:
            handle.write(line + "\n")
        self._buffer.clear()
        handle.flush()

    def close(self) -> None:
        # Idempotent; pending batch lines are written first.
        if self._handle is None:
            return
        self.flush()
        self._handle.close()
        self._handle = None

    def _require_handle(self) -> TextIO:
        if self._handle is None:
            raise ValueError(f"Trace sink for {self._path} is closed")
        return self._handle


class StderrTraceSink(TraceSink):
    # Keeps trace lines off stdout, which carries the CSV snapshot.
    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def emit(self, record: TraceRecord) -> None:
        (self._stream or sys.stderr).write(trace_to_json(record) + "\n")

    def flush(self) -> None:
        (self._stream or sys.stderr).flush()

    def close(self) -> None:
        self.flush()


def trace_to_json(record: TraceRecord) -> str:
    payload = asdict(record)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False, default=json_default)
