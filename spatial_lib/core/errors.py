"""
Error types for grid index construction.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Standard error codes for invalid configurations."""
    DEGENERATE_ENVELOPE = "DEGENERATE_ENVELOPE"
    NON_FINITE_ENVELOPE = "NON_FINITE_ENVELOPE"
    INVALID_SUBDIVISION = "INVALID_SUBDIVISION"


class InvalidConfiguration(ValueError):
    """Raised when a lattice cannot be built from the given parameters."""
    
    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        self.code = code
    
    def to_dict(self) -> dict:
        """Convert to dictionary for serialization (JSON-safe)."""
        return {
            "message": self.message,
            "error_code": self.code.value if self.code is not None else None,
        }
