"""
Validators Module - Record validation before persistence.
"""

from .record_validator import (
    RecordValidator,
    ValidationError
)

__all__ = [
    'RecordValidator',
    'ValidationError',
]
