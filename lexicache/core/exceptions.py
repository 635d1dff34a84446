"""
Exception hierarchy for the translation client.

None of these reach application code through ``TranslationClient.translate``;
they are raised and handled internally so every failure path can be logged
with a precise reason before falling back to the original text.
"""

from __future__ import annotations


class LexicacheError(Exception):
    """Base class for all lexicache errors."""
    pass


class TextTooLongError(LexicacheError):
    """Input text exceeds the maximum length accepted by the service."""
    
    def __init__(self, length: int, limit: int):
        self.length = length
        self.limit = limit
        super().__init__(f"Text exceeds {limit} character limit ({length} characters)")


class TranslationAPIError(LexicacheError):
    """The translation service call failed."""
    
    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
    
    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500


class ClientError(TranslationAPIError):
    """The service rejected the request (HTTP 4xx)."""
    pass


class TransientError(TranslationAPIError):
    """Network failure, server error, or unreadable response body."""
    pass


class RetryBudgetExceeded(LexicacheError):
    """The retry loop ran out of wall-clock time."""
    
    def __init__(self, budget: float, attempts: int):
        self.budget = budget
        self.attempts = attempts
        super().__init__(f"Translation timeout after {budget * 1000:.0f}ms ({attempts} attempts)")


class PartialBatchFailure(LexicacheError):
    """A batch succeeded but carried no usable result for one of its items."""
    
    def __init__(self, cache_key: str, reason: str = "missing"):
        self.cache_key = cache_key
        self.reason = reason
        super().__init__(f"No batch response for cache key {cache_key} ({reason})")


class PersistenceError(LexicacheError):
    """The durable store could not be read, written, or parsed."""
    pass
