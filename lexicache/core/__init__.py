"""
Core types shared by the cache and the translation client.
"""

from lexicache.core.exceptions import (
    LexicacheError,
    TextTooLongError,
    TranslationAPIError,
    ClientError,
    TransientError,
    RetryBudgetExceeded,
    PartialBatchFailure,
    PersistenceError,
)
from lexicache.core.models import (
    TranslationOptions,
    TranslationRequest,
    TranslationResponse,
    BatchRequest,
    BatchResponse,
    BatchResponseItem,
    CacheRecord,
)

__all__ = [
    # Errors
    "LexicacheError",
    "TextTooLongError",
    "TranslationAPIError",
    "ClientError",
    "TransientError",
    "RetryBudgetExceeded",
    "PartialBatchFailure",
    "PersistenceError",
    # Models
    "TranslationOptions",
    "TranslationRequest",
    "TranslationResponse",
    "BatchRequest",
    "BatchResponse",
    "BatchResponseItem",
    "CacheRecord",
]
