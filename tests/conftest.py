"""
Shared fixtures: a controllable clock and a fake translation service.
"""

from __future__ import annotations

import json

import httpx
import pytest

from lexicache.i18n.translator import BATCH_PATH, TRANSLATE_PATH, TranslationClient


class FakeClock:
    """Manually advanced clock (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTranslationService:
    """
    In-process stand-in for the translation API.

    Translations are "[<locale>] <text>". Queue HTTP status codes in
    ``single_failures`` / ``batch_failures`` to fail the next calls.
    """

    def __init__(self):
        self.calls: list[tuple[str, dict]] = []
        self.headers: list[httpx.Headers] = []
        self.single_failures: list[int] = []
        self.batch_failures: list[int] = []
        self.confidence = 0.95
        self.drop: set[str] = set()        # batch: texts left out of the response
        self.errors: set[str] = set()      # batch: texts answered with an error
        self.null_errors: set[str] = set() # batch: error entries with null fields
        self.malformed: set[str] = set()   # batch: entries that fail validation
        self.identity: set[str] = set()    # texts "translated" to themselves

    def translation(self, text: str, locale: str) -> str:
        if text in self.identity:
            return text
        return f"[{locale}] {text}"

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.calls.append((request.url.path, body))
        self.headers.append(request.headers)

        if request.url.path == TRANSLATE_PATH:
            if self.single_failures:
                return httpx.Response(self.single_failures.pop(0))
            return httpx.Response(200, json={
                "translated": self.translation(body["text"], body["locale"]),
                "locale": body["locale"],
                "cached": False,
                "confidence": self.confidence,
            })

        if request.url.path == BATCH_PATH:
            if self.batch_failures:
                return httpx.Response(self.batch_failures.pop(0))
            responses = []
            for item in body["requests"]:
                if item["text"] in self.drop:
                    continue
                if item["text"] in self.errors:
                    responses.append({"cache_key": item["cache_key"], "error": "unsupported"})
                    continue
                if item["text"] in self.null_errors:
                    responses.append({
                        "cache_key": item["cache_key"],
                        "error": "unsupported",
                        "translated": None,
                        "confidence": None,
                    })
                    continue
                if item["text"] in self.malformed:
                    responses.append({"cache_key": item["cache_key"], "confidence": "high"})
                    continue
                responses.append({
                    "cache_key": item["cache_key"],
                    "translated": self.translation(item["text"], item["locale"]),
                    "confidence": self.confidence,
                    "cached": False,
                })
            # The service does not promise to preserve request order
            responses.reverse()
            return httpx.Response(200, json={"responses": responses})

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls_to(self, path: str) -> list[dict]:
        return [body for call_path, body in self.calls if call_path == path]

    @property
    def single_calls(self) -> list[dict]:
        return self.calls_to(TRANSLATE_PATH)

    @property
    def batch_calls(self) -> list[dict]:
        return self.calls_to(BATCH_PATH)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service():
    return FakeTranslationService()


@pytest.fixture
def make_client(service):
    """Factory for clients wired to the fake service."""
    def factory(**kwargs) -> TranslationClient:
        kwargs.setdefault("default_language", "es-ES")
        return TranslationClient(
            api_key="test-key",
            customer_id="acme",
            transport=service.transport,
            **kwargs,
        )
    return factory
