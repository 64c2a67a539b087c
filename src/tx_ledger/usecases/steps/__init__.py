from .apply_transaction import ApplyTransaction
from .format_snapshot import FormatSnapshot
from .parse_transaction import ParseTransaction
from .write_output import WriteOutput

__all__ = [
    "ApplyTransaction",
    "FormatSnapshot",
    "ParseTransaction",
    "WriteOutput",
]
