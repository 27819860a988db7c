"""
Exception types raised by the seller analytics engines.

Not-found lookups are not errors: they return ``None`` so a caller cannot tell
"order does not exist" from "order belongs to another seller".
"""


class MarketplaceAnalyticsError(Exception):
    """Base class for analytics engine errors."""


class DataAccessError(MarketplaceAnalyticsError):
    """The storage collaborator failed, timed out, or broke its row contract."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"Storage call '{operation}' failed ({detail})")


class InvalidPeriod(MarketplaceAnalyticsError, ValueError):
    """Unrecognized symbolic period or a custom range with start >= end."""
