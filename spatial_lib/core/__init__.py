"""Core data structures for the grid index."""

from .types import Envelope, EnvelopeLike, CellRange, as_envelope
from .errors import ErrorCode, InvalidConfiguration

__all__ = [
    "Envelope",
    "EnvelopeLike",
    "CellRange",
    "as_envelope",
    "ErrorCode",
    "InvalidConfiguration",
]
