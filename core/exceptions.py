"""Domain-specific exceptions for the visit log."""


class GohanLogError(Exception):
    """Base exception for visit log errors."""


class RatingError(GohanLogError, ValueError):
    """Raised when a ratings map holds a blank key or an out-of-range score."""


class StoreError(GohanLogError):
    """Raised when a record or category store cannot read or write."""


class RecordNotFoundError(StoreError):
    """Raised when a record id is not present in the store."""


class PhotoError(GohanLogError):
    """Raised when photo data cannot be decoded."""
