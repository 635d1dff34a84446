"""
Translation client with caching, retries and request batching.

Every ``translate()`` call derives a cache key, answers from the cache when
it can, and otherwise goes to the translation service in one of two modes:

- individual: one HTTP call per request, retried with exponential backoff
  inside a fixed wall-clock budget
- batch (default): requests are queued and flushed together, either when
  ten are waiting or 50 ms after the first one arrived

``translate()`` never raises. Any failure resolves to the original text.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

from lexicache.cache.base import CacheAdapter
from lexicache.cache.hybrid import HybridPersistentCache
from lexicache.cache.memory import BoundedTTLCache
from lexicache.config import Settings, get_settings
from lexicache.core.exceptions import (
    ClientError,
    PartialBatchFailure,
    RetryBudgetExceeded,
    TextTooLongError,
    TranslationAPIError,
    TransientError,
)
from lexicache.core.models import (
    BatchRequest,
    BatchResponse,
    TranslationOptions,
    TranslationRequest,
    TranslationResponse,
)
from lexicache.core.utils import truncate
from lexicache.i18n.cache_key import generate_cache_key
from lexicache.i18n.languages import DEFAULT_LOCALE
from lexicache.i18n.locale_detector import LocaleDetector
from lexicache.storage.local import create_durable_store

logger = logging.getLogger(__name__)


# =============================================================================
# Limits and timings
# =============================================================================


MAX_TEXT_LENGTH = 5000
MAX_TONE_LENGTH = 50
MAX_CONTEXT_LENGTH = 500
LOW_CONFIDENCE_THRESHOLD = 0.4

# Individual mode: 5 attempts, 100ms doubling to 1600ms, 5s overall
MAX_ATTEMPTS = 5
BASE_DELAY = 0.1
MAX_DELAY = 1.6
TOTAL_BUDGET = 5.0
REQUEST_MARGIN = 0.1

# Batch mode
BATCH_SIZE = 10
BATCH_WINDOW = 0.05
BATCH_MAX_ATTEMPTS = 2
BATCH_RETRY_DELAY = 0.5

TRANSLATE_PATH = "/api/v1/translate"
BATCH_PATH = "/api/v1/translate_batch"


RetryObserver = Callable[[int], None]


# =============================================================================
# Retry policy
# =============================================================================


def _backoff(retry_state: RetryCallState) -> float:
    """Exponential delay, clamped so the next attempt still fits the budget."""
    failed_attempt = retry_state.attempt_number - 1
    delay = min(BASE_DELAY * 2 ** failed_attempt, MAX_DELAY)
    remaining = TOTAL_BUDGET - (retry_state.seconds_since_start or 0.0)
    return max(0.0, min(delay, remaining - REQUEST_MARGIN))


def _is_retryable(error: BaseException) -> bool:
    # 400 means the request itself is bad; resending it cannot help
    return not (isinstance(error, TranslationAPIError) and error.status_code == 400)


def _is_retryable_batch(error: BaseException) -> bool:
    return not (isinstance(error, TranslationAPIError) and error.is_client_error)


def _log_retry(retry_state: RetryCallState) -> None:
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed, retrying in {delay * 1000:.0f}ms: {error}"
    )


# =============================================================================
# Batch queue item
# =============================================================================


def _new_future() -> asyncio.Future[str]:
    return asyncio.get_running_loop().create_future()


@dataclass(frozen=True)
class QueuedRequest:
    """
    A cache miss waiting in the batch queue.

    The future is created together with the item and is completed exactly
    once by the flush that carries it.
    """

    request: TranslationRequest
    future: asyncio.Future[str] = field(default_factory=_new_future)

    @property
    def text(self) -> str:
        return self.request.text

    @property
    def cache_key(self) -> str:
        return self.request.cache_key

    def resolve(self, value: str) -> None:
        if not self.future.done():
            self.future.set_result(value)


# =============================================================================
# Translation Client
# =============================================================================


class TranslationClient:
    """
    Client for the remote translation service.

    Usage:
        async with TranslationClient(api_key="...", customer_id="acme") as client:
            # Simple
            text_es = await client.translate("Hello", {"language": "es-ES"})

            # With tone and context (better translations)
            text_fr = await client.translate(
                "Save",
                TranslationOptions(language="fr-FR", context="button label"),
            )

    Concurrent ``translate()`` calls on one client share its cache and,
    in batch mode, its request queue. Construct one client per application
    and pass it to whatever needs it.
    """

    def __init__(
        self,
        api_key: str,
        customer_id: str,
        endpoint: str = "http://localhost:8000",
        default_language: str | None = None,
        cache: CacheAdapter | None = None,
        locale_detector: LocaleDetector | None = None,
        batch_requests: bool = True,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.customer_id = customer_id
        self.endpoint = endpoint.rstrip("/")
        self.batch_requests = batch_requests
        self._default_language = default_language
        self._locale_detector = locale_detector
        self.cache: CacheAdapter = cache if cache is not None else BoundedTTLCache()

        self._http = httpx.AsyncClient(
            base_url=self.endpoint,
            headers={
                "X-API-Key": api_key,
                "X-Customer-ID": customer_id,
            },
            timeout=timeout,
            transport=transport,
        )

        # Batch state
        self._queue: list[QueuedRequest] = []
        self._timer: asyncio.TimerHandle | None = None
        self._flush_tasks: set[asyncio.Task] = set()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        locale_detector: LocaleDetector | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TranslationClient:
        """Build a client and its cache from configuration."""
        settings = settings or get_settings()

        if not settings.is_configured:
            logger.warning("Translation service credentials are not configured")

        cache = HybridPersistentCache(
            max_memory_entries=settings.cache_max_entries,
            ttl_hours=settings.cache_ttl_hours,
            store=create_durable_store(settings.cache_path),
            prefix=settings.cache_prefix,
        )
        return cls(
            api_key=settings.api_key,
            customer_id=settings.customer_id,
            endpoint=settings.endpoint,
            default_language=settings.default_language,
            cache=cache,
            locale_detector=locale_detector,
            batch_requests=settings.batch_requests,
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> TranslationClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Flush queued requests, finish background cache writes, close HTTP."""
        await self.flush()
        while self._flush_tasks:
            await asyncio.gather(*list(self._flush_tasks), return_exceptions=True)
        if isinstance(self.cache, HybridPersistentCache):
            await self.cache.wait_pending()
        await self._http.aclose()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def translate(
        self,
        text: str,
        options: TranslationOptions | dict[str, Any] | None = None,
        on_retry_attempt: RetryObserver | None = None,
    ) -> str:
        """
        Translate text, falling back to the original on any failure.

        Args:
            text: Text to translate (at most 5000 characters)
            options: Target language, tone and context
            on_retry_attempt: Called with the attempt number before each retry
                (individual mode only)

        Returns:
            Translated text, or ``text`` unchanged
        """
        if not text:
            return text
        if len(text) > MAX_TEXT_LENGTH:
            logger.error(f"{TextTooLongError(len(text), MAX_TEXT_LENGTH)}, not translating")
            return text

        try:
            if options is None:
                options = TranslationOptions()
            elif isinstance(options, dict):
                options = TranslationOptions.model_validate(options)

            request = self._build_request(text, options)
            logger.debug(f"Translating {request.locale}: {text[:80]!r} (key {request.cache_key[:12]})")

            cached = self.cache.get(request.cache_key)
            if cached is not None:
                logger.debug("Found translation in cache")
                return cached

            if self.batch_requests:
                logger.debug("Cache miss, adding to batch queue")
                return await self._enqueue(QueuedRequest(request))

            logger.debug("Cache miss, making individual translation request")
            return await self._translate_individual(request, on_retry_attempt)
        except ValidationError as e:
            logger.error(f"Invalid translation options, not translating: {e.error_count()} errors")
            return text
        except Exception as e:
            logger.exception(f"Unexpected translation failure: {e}")
            return text

    async def flush(self) -> None:
        """Send everything currently queued as one batch."""
        batch = self._drain_queue()
        if not batch:
            logger.debug("Queue flush called but queue is empty")
            return
        await self._send_batch(batch)

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_stats(self) -> dict[str, int]:
        return {
            "size": self.cache.size(),
            "max_size": self.cache.max_entries,
        }

    @property
    def default_language(self) -> str | None:
        return self._default_language

    def update_default_language(self, language: str | None) -> None:
        """Change the default target language without rebuilding the client."""
        self._default_language = language

    @property
    def queue_size(self) -> int:
        return len(self._queue)

    # -------------------------------------------------------------------------
    # Request building
    # -------------------------------------------------------------------------

    def _detect_locale(self) -> str:
        if self._locale_detector is None:
            return DEFAULT_LOCALE
        try:
            return self._locale_detector.detect_locale() or DEFAULT_LOCALE
        except Exception as e:
            logger.warning(f"Locale detection failed, using {DEFAULT_LOCALE}: {e}")
            return DEFAULT_LOCALE

    def _build_request(self, text: str, options: TranslationOptions) -> TranslationRequest:
        locale = options.language or self._default_language or self._detect_locale()
        tone = truncate(options.tone, MAX_TONE_LENGTH)
        context = truncate(options.context, MAX_CONTEXT_LENGTH)
        return TranslationRequest(
            text=text,
            locale=locale,
            tone=tone,
            context=context,
            cache_key=generate_cache_key(self.customer_id, text, locale, context, tone),
        )

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    async def _post(self, path: str, payload: BaseModel) -> Any:
        try:
            response = await self._http.post(path, json=payload.model_dump())
        except httpx.HTTPError as e:
            raise TransientError(f"Request to {path} failed: {e!r}") from e

        if not response.is_success:
            error_class = ClientError if response.is_client_error else TransientError
            raise error_class(
                f"API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransientError(f"Invalid JSON from {path}: {e}") from e

    async def _post_translate(self, request: TranslationRequest) -> TranslationResponse:
        data = await self._post(TRANSLATE_PATH, request)
        try:
            return TranslationResponse.model_validate(data)
        except ValidationError as e:
            raise TransientError(f"Malformed translate response: {e.error_count()} errors") from e

    # -------------------------------------------------------------------------
    # Individual mode
    # -------------------------------------------------------------------------

    async def _translate_individual(
        self,
        request: TranslationRequest,
        on_retry_attempt: RetryObserver | None = None,
    ) -> str:
        started = time.monotonic()
        attempts = 0

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(MAX_ATTEMPTS) | stop_after_delay(TOTAL_BUDGET),
                wait=_backoff,
                retry=retry_if_exception(_is_retryable),
                before_sleep=_log_retry,
                reraise=True,
            ):
                with attempt:
                    attempts += 1
                    if attempts > 1 and on_retry_attempt is not None:
                        self._notify_retry(on_retry_attempt, attempts - 1)
                    result = await self._post_translate(request)
        except TranslationAPIError as e:
            if e.status_code == 400:
                logger.error(f"Translation failed with status code 400, will not retry: {e}")
            elif time.monotonic() - started >= TOTAL_BUDGET:
                logger.error(f"{RetryBudgetExceeded(TOTAL_BUDGET, attempts)}: {e}")
            else:
                logger.error(f"Translation failed after {attempts} attempts: {e}")
            return request.text

        self.cache.set(request.cache_key, result.translated)

        if result.confidence < LOW_CONFIDENCE_THRESHOLD:
            logger.warning(
                f"Low confidence translation ({result.confidence}): "
                f"{request.text[:80]!r} -> {result.translated[:80]!r} [{request.locale}]"
            )
        if attempts > 1:
            logger.info(f"Translation succeeded on attempt {attempts}")

        return result.translated

    @staticmethod
    def _notify_retry(observer: RetryObserver, attempt: int) -> None:
        try:
            observer(attempt)
        except Exception as e:
            logger.warning(f"Retry observer failed for attempt {attempt}: {e}")

    # -------------------------------------------------------------------------
    # Batch mode
    # -------------------------------------------------------------------------

    async def _enqueue(self, item: QueuedRequest) -> str:
        self._queue.append(item)
        logger.debug(f"Added to queue, queue size: {len(self._queue)}")

        if len(self._queue) >= BATCH_SIZE:
            logger.debug(f"Queue full ({BATCH_SIZE} requests), flushing immediately")
            self._spawn_flush()
        elif self._timer is None:
            logger.debug(f"Starting {BATCH_WINDOW * 1000:.0f}ms queue timer")
            self._timer = asyncio.get_running_loop().call_later(BATCH_WINDOW, self._on_timer)

        return await item.future

    def _on_timer(self) -> None:
        self._timer = None
        self._spawn_flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _drain_queue(self) -> list[QueuedRequest]:
        # Swap synchronously: later requests start a fresh batch
        self._cancel_timer()
        batch, self._queue = self._queue, []
        return batch

    def _spawn_flush(self) -> None:
        batch = self._drain_queue()
        if not batch:
            return
        task = asyncio.get_running_loop().create_task(self._send_batch(batch))
        self._flush_tasks.add(task)
        task.add_done_callback(self._flush_tasks.discard)

    async def _send_batch(self, batch: list[QueuedRequest]) -> None:
        logger.debug(f"Flushing queue with {len(batch)} translations")
        try:
            results = await self._translate_batch_with_retry(batch)
        except Exception as e:
            logger.exception(f"Unexpected batch failure: {e}")
            results = {}

        for item in batch:
            result = results.get(item.cache_key)
            if result and result != item.text:
                self.cache.set(item.cache_key, result)
                item.resolve(result)
            else:
                item.resolve(item.text)

    async def _translate_batch_with_retry(self, batch: list[QueuedRequest]) -> dict[str, str]:
        """
        Send a batch, retrying once after 500ms unless the service said 4xx.

        Returns a mapping of cache key to translation. Items without a usable
        result are absent from the mapping.
        """
        results: dict[str, str] = {}
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(BATCH_MAX_ATTEMPTS),
                wait=wait_fixed(BATCH_RETRY_DELAY),
                retry=retry_if_exception(_is_retryable_batch),
                before_sleep=_log_retry,
                reraise=True,
            ):
                with attempt:
                    results = await self._translate_batch(batch)
        except TranslationAPIError as e:
            logger.error(f"Batch translation of {len(batch)} texts failed, returning original text: {e}")
            return {}
        return results

    async def _translate_batch(self, batch: list[QueuedRequest]) -> dict[str, str]:
        requests: list[TranslationRequest] = []
        for item in batch:
            if len(item.text) > MAX_TEXT_LENGTH:
                logger.error(f"{TextTooLongError(len(item.text), MAX_TEXT_LENGTH)} in batch request")
                continue
            requests.append(item.request)

        logger.debug(
            f"Making batch request with {len(requests)} valid translations "
            f"({len(batch) - len(requests)} filtered out)"
        )
        if not requests:
            return {}

        data = await self._post(BATCH_PATH, BatchRequest(requests=requests))
        try:
            response, dropped = BatchResponse.from_payload(data)
        except ValueError as e:
            raise TransientError(f"Malformed batch response: {e}") from e
        if dropped:
            logger.warning(f"Ignoring {dropped} malformed batch response entries")

        # Responses may come back in any order; match on cache key
        by_key = response.by_cache_key()
        results: dict[str, str] = {}
        for request in requests:
            item = by_key.get(request.cache_key)
            if item is None or not item.succeeded:
                reason = (item.error or "no translation") if item is not None else "missing"
                logger.warning(str(PartialBatchFailure(request.cache_key, reason)))
                continue

            if item.confidence is not None and item.confidence < LOW_CONFIDENCE_THRESHOLD:
                logger.warning(
                    f"Low confidence batch translation ({item.confidence}): "
                    f"{request.text[:80]!r} -> {item.translated[:80]!r}"
                )
            results[request.cache_key] = item.translated

        return results
