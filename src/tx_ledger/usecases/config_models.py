from __future__ import annotations

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

# Config models map YAML sections to typed structures.


class StepDecl(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    config: dict[str, Any] = Field(default_factory=dict)


class PipelineConfig(BaseModel):
    # Two ordered step lists: per-row ingestion and end-of-run snapshot reporting.
    model_config = ConfigDict(extra="forbid")
    ingest: list[StepDecl]
    report: list[StepDecl]


class LedgerConfig(BaseModel):
    # What the driver does when a withdrawal exceeds available funds.
    model_config = ConfigDict(extra="forbid")
    on_insufficient_funds: Literal["skip", "abort"] = "skip"


class InputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    has_headers: bool = True
    encoding: str = "utf-8"


class OutputConfig(BaseModel):
    # No file_path means the snapshot is written to stdout.
    model_config = ConfigDict(extra="forbid")
    file_path: str | None = Field(default=None, validation_alias=AliasChoices("file_path", "file"))
    atomic_replace: bool = False
    write_header: bool = True


class TraceSignatureConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    mode: Literal["type_only", "type_and_identity", "hash"] = "type_only"


class TraceSinkJsonlConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    path: str
    write_mode: Literal["line", "batch"] = "line"
    flush_every_n: int = Field(default=1, ge=1)
    fsync_every_n: int | None = None


class TraceSinkConfig(BaseModel):
    # Only one sink is active at a time.
    model_config = ConfigDict(extra="forbid")
    kind: Literal["jsonl", "stderr"]
    jsonl: TraceSinkJsonlConfig | None = None

    @model_validator(mode="after")
    def _require_jsonl(self) -> TraceSinkConfig:
        # For jsonl kind, a jsonl section is required to avoid silent defaults.
        if self.kind == "jsonl" and self.jsonl is None:
            raise ValueError("tracing.sink.jsonl is required when kind is 'jsonl'")
        return self


class TracingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    enabled: bool = False
    signature: TraceSignatureConfig = Field(default_factory=TraceSignatureConfig)
    sink: TraceSinkConfig | None = None


class ScenarioConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    description: str | None = None


class AppConfig(BaseModel):
    # AppConfig is the top-level typed view of configuration.
    model_config = ConfigDict(extra="forbid")
    version: int
    scenario: ScenarioConfig
    pipeline: PipelineConfig
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    tracing: TracingConfig | None = None
