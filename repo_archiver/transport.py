"""
HTTP Transport for the GitHub REST API.

Handles HTTP communication with token authentication, retry logic for
read requests, and error handling.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from repo_archiver.exceptions import (
    AuthenticationError,
    HostError,
    NotFoundError,
    RateLimitedError,
    ServerError,
)
from repo_archiver.logging import log_http_request, log_http_response


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 3
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


class HTTPTransport:
    """
    HTTP transport layer with token auth and retry logic.

    Handles:
    - Bearer token and GitHub API headers
    - Exponential backoff with jitter for retries
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions

    Requests made with ``retry=False`` are sent exactly once; the archive
    call relies on that.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: GitHub token sent as a bearer credential
            timeout: Request timeout in seconds
            retry_config: Configuration for retry behavior
            client: Preconfigured httpx client (tests pass one with a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if client is None:
            client = httpx.Client(base_url=self.base_url, timeout=timeout)
        client.headers.update(headers)
        self._client = client

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
        retry: bool = True,
    ) -> httpx.Response:
        """
        Make a request and return the successful response.

        Args:
            method: HTTP method
            path: API path (e.g., "/user/repos")
            params: Query parameters
            body: JSON request body
            retry: Whether retryable failures may be re-sent

        Returns:
            The httpx response (status < 400)

        Raises:
            HostError: On API errors
        """
        def make_request() -> httpx.Response:
            log_http_request(method, f"{self.base_url}{path}", body=body)
            started = time.monotonic()
            response = self._client.request(method, path, params=params, json=body)
            log_http_response(
                response.status_code,
                f"{self.base_url}{path}",
                elapsed_ms=(time.monotonic() - started) * 1000,
            )
            return response

        max_retries = self.retry_config.max_retries if retry else 0
        return self._execute_with_retry(make_request, max_retries)

    def _execute_with_retry(
        self, request_fn: Callable[[], httpx.Response], max_retries: int
    ) -> httpx.Response:
        """
        Execute a request with automatic retry on retryable errors.

        Args:
            request_fn: Function that makes the HTTP request
            max_retries: Retries allowed after the first attempt

        Returns:
            Successful response

        Raises:
            HostError: On non-retryable errors or after max retries
        """
        last_error: Exception | None = None

        for attempt in range(max_retries + 1):
            try:
                response = request_fn()

                if response.status_code < 400:
                    return response

                error = self._parse_error_response(response)

                if not self._should_retry(response.status_code, attempt, max_retries):
                    raise error

                last_error = error

                retry_after = response.headers.get("Retry-After")
                wait_time = self._get_backoff_time(attempt, retry_after)
                time.sleep(wait_time)

            except httpx.RequestError as e:
                # Network errors are retryable
                if attempt >= max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e

                last_error = e
                wait_time = self._get_backoff_time(attempt, None)
                time.sleep(wait_time)

        if last_error:
            if isinstance(last_error, HostError):
                raise last_error
            raise ServerError("MAX_RETRIES_EXCEEDED", str(last_error))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int, max_retries: int) -> bool:
        """Return True if a response with ``status_code`` should be re-sent."""
        if attempt >= max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> HostError:
        """
        Parse a GitHub error response into a typed exception.

        GitHub error bodies look like ``{"message": "...", "documentation_url": "..."}``.
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message") or response.text or f"HTTP {response.status_code}"
        status_code = response.status_code
        code = f"HTTP_{status_code}"

        if status_code == 429 or (
            status_code == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            retry_after_str = response.headers.get("Retry-After", "60")
            try:
                retry_after = int(retry_after_str)
            except ValueError:
                retry_after = 60
            return RateLimitedError(code, message, retry_after)
        elif status_code in (401, 403):
            return AuthenticationError(code, message)
        elif status_code == 404:
            return NotFoundError(code, message)
        elif status_code >= 500:
            return ServerError(code, message)
        else:
            return HostError(code, message)
