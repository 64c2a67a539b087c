from __future__ import annotations

from dataclasses import dataclass

from tx_ledger.ports.output_sink import OutputSink
from tx_ledger.usecases.messages import OutputLine


@dataclass(frozen=True, slots=True)
class WriteOutput:
    output_sink: OutputSink

    def __call__(self, msg: OutputLine, ctx: object | None) -> list[OutputLine]:
        # Sink is responsible for persistence; step just delegates.
        self.output_sink.write_line(msg.text)
        return []
