"""Base API client with circuit breaker and bounded attempts.

This module provides:
- CircuitState enum for circuit breaker states
- CircuitBreaker dataclass tracking consecutive upstream failures
- BaseAPIClient, the httpx wrapper every upstream client extends
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx
import structlog

from deployerhunter.core.exceptions import CircuitBreakerOpenError, ExternalServiceError

log = structlog.get_logger(__name__)


class CircuitState(Enum):
    """Circuit breaker states."""

    CLOSED = "closed"  # Requests allowed
    OPEN = "open"  # Requests blocked until cooldown elapses
    HALF_OPEN = "half_open"  # One probe request allowed


@dataclass
class CircuitBreaker:
    """Circuit breaker guarding one upstream service.

    Opens after ``failure_threshold`` consecutive failures. Once
    ``cooldown_seconds`` have passed a single probe is let through; a failed
    probe reopens the circuit immediately.

    Attributes:
        failure_threshold: Consecutive failures before opening.
        cooldown_seconds: Seconds to wait before the half-open probe.
        failure_count: Current consecutive failure count.
        opened_at: Monotonic time of the most recent failure.
        state: Current circuit state.
    """

    failure_threshold: int = 5
    cooldown_seconds: int = 30
    failure_count: int = field(default=0, init=False)
    opened_at: float | None = field(default=None, init=False)
    state: CircuitState = field(default=CircuitState.CLOSED, init=False)

    def record_success(self) -> None:
        """Reset the failure count and close the circuit."""
        self.failure_count = 0
        self.state = CircuitState.CLOSED

    def record_failure(self) -> None:
        """Count a failure, opening the circuit when the threshold is hit."""
        self.failure_count += 1
        self.opened_at = time.monotonic()

        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.state = CircuitState.OPEN
            log.warning(
                "circuit_breaker_opened",
                failure_count=self.failure_count,
                threshold=self.failure_threshold,
            )

    def can_execute(self) -> bool:
        """Check whether a request may be sent, moving OPEN to HALF_OPEN after cooldown."""
        if self.state != CircuitState.OPEN:
            return True

        if self.opened_at is None:
            return False

        elapsed = time.monotonic() - self.opened_at
        if elapsed >= self.cooldown_seconds:
            self.state = CircuitState.HALF_OPEN
            log.info("circuit_breaker_half_open", cooldown_elapsed=round(elapsed, 1))
            return True
        return False

    def raise_if_open(self, service: str) -> None:
        """Raise CircuitBreakerOpenError if requests are currently blocked."""
        if not self.can_execute():
            remaining = self.cooldown_seconds - (time.monotonic() - (self.opened_at or 0.0))
            raise CircuitBreakerOpenError(
                f"{service}: circuit open, next probe in {max(0.0, remaining):.1f}s"
            )


class BaseAPIClient:
    """Base API client with bounded attempts and circuit breaker support.

    Provides:
    - Lazy ``httpx.AsyncClient`` creation on first request
    - ``max_attempts`` tries per call with capped exponential backoff
      (upstream fetchers use a single attempt)
    - Circuit breaker protection
    - JSON decoding that reports malformed bodies as ExternalServiceError

    Example:
        client = BaseAPIClient(base_url="https://api.example.com", service="example")
        data = await client.get_json("/endpoint")
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        service: str = "upstream",
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        max_attempts: int = 1,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_cooldown: int = 30,
    ) -> None:
        """Initialize BaseAPIClient.

        Args:
            base_url: Base URL for all requests.
            service: Service name used in logs and errors.
            timeout: Request timeout in seconds.
            headers: Default headers for all requests.
            max_attempts: Attempts per request before giving up.
            circuit_breaker_threshold: Failures before circuit opens.
            circuit_breaker_cooldown: Seconds before half-open.
        """
        self.base_url = base_url
        self.service = service
        self.timeout = timeout
        self.headers = headers or {}
        self.max_attempts = max(1, max_attempts)
        self._client: httpx.AsyncClient | None = None
        self._circuit_breaker = CircuitBreaker(
            failure_threshold=circuit_breaker_threshold,
            cooldown_seconds=circuit_breaker_cooldown,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
            log.debug("httpx_client_created", service=self.service, base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("httpx_client_closed", service=self.service)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Make an HTTP request guarded by the circuit breaker.

        4xx responses other than 429 fail immediately; 429, 5xx and
        transport errors count against the breaker and are retried while
        attempts remain.

        Raises:
            CircuitBreakerOpenError: If the circuit breaker is open.
            ExternalServiceError: If every attempt failed.
        """
        self._circuit_breaker.raise_if_open(self.service)

        client = await self._get_client()
        last_error: Exception | None = None

        for attempt in range(self.max_attempts):
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                self._circuit_breaker.record_success()
                return response

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code
                if 400 <= status_code < 500 and status_code != 429:
                    log.warning(
                        "request_client_error",
                        service=self.service,
                        path=path,
                        status_code=status_code,
                    )
                    raise ExternalServiceError(
                        service=self.service,
                        message=f"HTTP {status_code}",
                        status_code=status_code,
                    ) from e

                self._circuit_breaker.record_failure()
                last_error = e
                log.warning(
                    "request_server_error",
                    service=self.service,
                    path=path,
                    status_code=status_code,
                    attempt=attempt + 1,
                )

            except httpx.RequestError as e:
                self._circuit_breaker.record_failure()
                last_error = e
                log.warning(
                    "request_connection_error",
                    service=self.service,
                    path=path,
                    error=str(e),
                    attempt=attempt + 1,
                )

            if attempt < self.max_attempts - 1:
                await asyncio.sleep(min(2**attempt, 4))

        status_code = None
        if isinstance(last_error, httpx.HTTPStatusError):
            status_code = last_error.response.status_code
        raise ExternalServiceError(
            service=self.service,
            message=f"Request failed after {self.max_attempts} attempt(s): {last_error}",
            status_code=status_code,
        )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self._request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a POST request."""
        return await self._request("POST", path, **kwargs)

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        """GET a path and decode the JSON body.

        Raises:
            ExternalServiceError: On request failure or a non-JSON body.
        """
        return self._decode(await self.get(path, **kwargs), path)

    async def post_json(self, path: str, **kwargs: Any) -> Any:
        """POST to a path and decode the JSON body.

        Raises:
            ExternalServiceError: On request failure or a non-JSON body.
        """
        return self._decode(await self.post(path, **kwargs), path)

    def _decode(self, response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            log.warning("response_malformed_json", service=self.service, path=path)
            raise ExternalServiceError(
                service=self.service,
                message="Malformed JSON response",
                status_code=response.status_code,
            ) from e
