"""
HTTP plumbing for the sentiment scoring model.

BaseApiClient posts JSON to a model endpoint, paced by a per-minute budget
and retried on throttling or server failure. Subclasses add the payload
shape for a specific provider:

    class ScoringClient(BaseApiClient):
        def __init__(self, api_key: str):
            super().__init__(
                base_url="https://api.example.com/v1",
                headers={"Authorization": f"Bearer {api_key}"},
                requests_per_minute=120,
            )

        async def score(self, prompt: str) -> dict:
            return await self._post("/chat/completions", json={"prompt": prompt})
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import ExternalAPIError, RateLimitError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How often and how long to wait between attempts."""

    max_attempts: int = 3
    # Server errors wait backoff_base ** attempt seconds
    backoff_base: float = 2.0
    # Upper bound on a model's Retry-After hint
    max_throttle_wait: float = 30.0

    def backoff(self, attempt: int) -> float:
        return self.backoff_base**attempt

    def throttle_wait(self, retry_after: int) -> float:
        return min(float(retry_after), self.max_throttle_wait)

    def has_attempts_left(self, attempt: int) -> bool:
        return attempt + 1 < self.max_attempts


class RateLimiter:
    """Spaces calls evenly across the minute so bursts never hit the model."""

    def __init__(self, requests_per_minute: int = 600):
        self.interval = 60.0 / requests_per_minute
        self._next_slot = 0.0
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            wait = self._next_slot - time.monotonic()
            if wait > 0:
                await asyncio.sleep(wait)
            self._next_slot = time.monotonic() + self.interval


def _retry_after(response: httpx.Response) -> int:
    try:
        return int(response.headers.get("retry-after", 60))
    except ValueError:
        return 60


class BaseApiClient:
    """
    JSON-over-HTTP client for the scoring model.

    The httpx.AsyncClient is opened on first request and released by
    close() or on leaving an ``async with`` block. Tests inject an
    httpx.MockTransport through ``transport``.
    """

    def __init__(
        self,
        *,
        base_url: str,
        headers: dict[str, str] | None = None,
        requests_per_minute: int = 600,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = headers or {}
        self._timeout = timeout
        self._transport = transport
        self._pacer = RateLimiter(requests_per_minute)
        self._policy = RetryPolicy(max_attempts=max_retries)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "BaseApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    def is_configured(self) -> bool:
        """Subclasses that need credentials override this."""
        return True

    async def _post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """
        POST a JSON body and decode the JSON reply.

        Raises:
            RateLimitError: If the model keeps throttling until attempts run out
            ExternalAPIError: On a 4xx reply, or when every attempt failed
        """
        failure: ExternalAPIError | None = None

        for attempt in range(self._policy.max_attempts):
            await self._pacer.acquire()
            try:
                response = await self.client.post(path, json=json)
            except httpx.RequestError as e:
                failure = ExternalAPIError(f"Request to {self._base_url}{path} failed: {e}")
                await self._pause(attempt, self._policy.backoff(attempt), failure.message)
                continue

            if response.status_code == 429:
                retry_after = _retry_after(response)
                if not self._policy.has_attempts_left(attempt):
                    raise RateLimitError(
                        f"Scoring model rate limit exceeded. Try again in {retry_after} seconds.",
                        retry_after=retry_after,
                    )
                await self._pause(attempt, self._policy.throttle_wait(retry_after), "throttled")
                continue

            if response.is_success:
                return response.json()

            failure = ExternalAPIError(
                f"HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
            if response.is_client_error:
                raise failure
            await self._pause(attempt, self._policy.backoff(attempt), failure.message)

        raise failure or ExternalAPIError("Request failed after retries")

    async def _pause(self, attempt: int, seconds: float, reason: str) -> None:
        if not self._policy.has_attempts_left(attempt):
            return
        logger.warning(
            "Scoring request attempt %d/%d failed (%s), retrying in %.1fs",
            attempt + 1,
            self._policy.max_attempts,
            reason,
            seconds,
        )
        await asyncio.sleep(seconds)
