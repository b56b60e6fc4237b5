# src/geocolumns/vector/errors.py

"""
Exceptions raised by feature collections and their readers.
"""

__all__ = [
    "GeoColumnsError",
    "CollectionValidationError",
    "MaskLengthError"
]

class GeoColumnsError(Exception):
    """Base class for all geocolumns errors."""

class CollectionValidationError(GeoColumnsError, ValueError):
    """Input data cannot form a consistent collection. Nothing was built or changed."""

class MaskLengthError(GeoColumnsError, AssertionError):
    """A filter mask does not have one flag per feature. This is a caller bug."""
