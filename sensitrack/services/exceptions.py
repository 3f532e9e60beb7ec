"""
Service-level exceptions.

This module contains exceptions that can be raised by the cycle store.
The analysis engine itself never raises: missing evidence is reported as
absent fields of the analysis.
"""

class CycleStoreError(Exception):
    """Base exception for cycle store errors."""
    pass

class CycleNotFoundError(CycleStoreError):
    """Raised when a requested cycle does not exist."""
    pass

class InvalidEntryError(CycleStoreError):
    """Raised when an entry cannot be saved, e.g. missing or invalid date."""
    pass

class CycleStorageError(CycleStoreError):
    """Raised when the underlying table rejects a read or write."""
    pass
