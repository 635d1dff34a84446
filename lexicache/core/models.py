"""
Data models for the translation client.

Wire models mirror the JSON bodies of the translation API. The persisted
cache record is the JSON document written to the durable store.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError


# =============================================================================
# Caller-facing options
# =============================================================================


class TranslationOptions(BaseModel):
    """Per-call translation options."""

    language: str | None = None  # Target locale, e.g. "es-ES"
    tone: str | None = None
    context: str | None = None


# =============================================================================
# Wire models
# =============================================================================


class TranslationRequest(BaseModel):
    """Body of a single translate call (also one entry of a batch)."""

    text: str
    locale: str
    tone: str = ""
    context: str = ""
    cache_key: str


class TranslationResponse(BaseModel):
    """Response of a single translate call."""

    translated: str
    locale: str = ""
    cached: bool = False
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)


class BatchRequest(BaseModel):
    """Body of a batch translate call."""

    requests: list[TranslationRequest]


class BatchResponseItem(BaseModel):
    """
    One entry of a batch response, matched to its request by cache key.

    Error entries may carry nulls for ``translated`` and ``confidence``.
    """

    cache_key: str
    translated: str | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    cached: bool | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return not self.error and self.translated is not None


class BatchResponse(BaseModel):
    """Response of a batch translate call. Order is not significant."""

    responses: list[BatchResponseItem] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, data: Any) -> tuple[BatchResponse, int]:
        """
        Validate a batch response one entry at a time.

        A malformed entry is dropped without failing its siblings, so its
        request is later reported as missing.

        Returns:
            The response and the number of dropped entries

        Raises:
            ValueError: If the payload is not an object with a responses list
        """
        entries = data.get("responses", []) if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ValueError("batch response must be an object with a 'responses' list")

        items: list[BatchResponseItem] = []
        dropped = 0
        for entry in entries:
            try:
                items.append(BatchResponseItem.model_validate(entry))
            except ValidationError:
                dropped += 1
        return cls(responses=items), dropped

    def by_cache_key(self) -> dict[str, BatchResponseItem]:
        return {item.cache_key: item for item in self.responses}


# =============================================================================
# Persistence
# =============================================================================


class CacheRecord(BaseModel):
    """A cache entry as stored in the durable tier."""

    value: str
    timestamp: int  # milliseconds since epoch
