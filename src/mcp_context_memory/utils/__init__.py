"""Shared helpers: identifiers, timestamps and the error taxonomy."""

from .errors import (
    AlreadyExistsError,
    ConfirmationRequiredError,
    InvalidInputError,
    MemoryStoreError,
    NotFoundError,
    UnsupportedOperationError,
)
from .ids import new_id, now, size_of

__all__ = [
    "AlreadyExistsError",
    "ConfirmationRequiredError",
    "InvalidInputError",
    "MemoryStoreError",
    "NotFoundError",
    "UnsupportedOperationError",
    "new_id",
    "now",
    "size_of",
]
