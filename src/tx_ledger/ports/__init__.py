from .input_source import InputSource
from .output_sink import OutputSink
from .trace_sink import TraceSink

# Public port exports keep wiring explicit at composition time.
__all__ = ["InputSource", "OutputSink", "TraceSink"]
