from .input_source import CsvInputSource
from .output_sink import FileOutputSink, StdoutOutputSink
from .trace_sinks import JsonlTraceSink, StderrTraceSink

# Public adapter exports make wiring simpler.
__all__ = [
    "CsvInputSource",
    "FileOutputSink",
    "JsonlTraceSink",
    "StdoutOutputSink",
    "StderrTraceSink",
]
