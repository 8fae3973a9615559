"""
Custom exception hierarchy for the inventory sync engine.

Exceptions are categorized as:
- RetryableError: Transient errors the feed client retries in place
- NonRetryableError: Errors that end the current request, item or run

Only ConfigurationError, FeedUnavailable, RateLimitExceeded and
SnapshotError abort a sync run. ItemProcessingError and PersistenceError
are recorded in the run result and processing continues.
"""


class InventorySyncException(Exception):
    """Base exception for the inventory sync engine."""
    pass


# ============================================
# RETRYABLE ERRORS - Retried by the feed client
# ============================================
class RetryableError(InventorySyncException):
    """
    Base class for errors that should trigger retry.

    Raised for a single HTTP attempt; the feed client catches these and
    retries the same page until its attempt budget is spent.
    """
    pass


class ExternalAPIError(RetryableError):
    """
    Error from the external inventory API (non-2xx, non-429 or transport).
    """
    def __init__(self, service: str, message: str, status_code: int = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} API error: {message}")


class RateLimitError(RetryableError):
    """
    Rate limit response (HTTP 429).

    Should retry after the specified delay.
    """
    def __init__(self, service: str, retry_after: float = 1.0):
        self.service = service
        self.retry_after = retry_after
        super().__init__(f"{service} rate limited. Retry after {retry_after}s")


# ============================================
# NON-RETRYABLE ERRORS - No automatic retry
# ============================================
class NonRetryableError(InventorySyncException):
    """
    Base class for errors that should NOT trigger retry.
    """
    pass


class ConfigurationError(NonRetryableError):
    """
    Required credential or setting is missing.

    Raised before any network call; needs configuration fix, not retry.
    """
    pass


class FeedUnavailable(NonRetryableError):
    """Feed kept failing after every retry attempt was used."""
    def __init__(self, service: str, message: str, attempts: int, status_code: int = None):
        self.service = service
        self.attempts = attempts
        self.status_code = status_code
        super().__init__(f"{service} unavailable after {attempts} attempts: {message}")


class RateLimitExceeded(NonRetryableError):
    """Feed kept answering 429 after every retry attempt was used."""
    def __init__(self, service: str, attempts: int):
        self.service = service
        self.attempts = attempts
        super().__init__(f"{service} rate limit exceeded, max retries reached ({attempts} attempts)")


class SnapshotError(NonRetryableError):
    """Local equipment snapshot could not be read."""
    pass


class ItemProcessingError(NonRetryableError):
    """A single feed item could not be reconciled; the item is skipped."""
    def __init__(self, external_id, name, message: str):
        self.external_id = external_id
        self.name = name
        super().__init__(f"Failed to process item {external_id} ({name}): {message}")


class PersistenceError(NonRetryableError):
    """
    A read or write against the local store failed.

    During apply this is recorded per item and the chunk continues.
    """
    def __init__(self, operation: str, message: str, reference: str | None = None):
        self.operation = operation
        self.reference = reference
        if reference:
            super().__init__(f"{operation} failed for {reference}: {message}")
        else:
            super().__init__(f"{operation} failed: {message}")
