# ABOUTME: Fetch error hierarchy and retry policy built on tenacity
# ABOUTME: Only connection-level failures are retryable; retries are off unless configured

from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from poudre_flies.utils.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class FetchError(Exception):
    """Base exception for upstream fetch failures."""

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class NetworkError(FetchError):
    """Raised when the connection itself fails (DNS, refused, reset)."""

    def __init__(self, message: str, url: str | None = None, cause: BaseException | None = None):
        super().__init__(message, url=url)
        self.cause = cause


class FetchTimeoutError(NetworkError, TimeoutError):
    """Raised when a request exceeds its timeout."""

    pass


class HttpError(FetchError):
    """Raised when a required fetch returns a non-2xx status."""

    def __init__(self, message: str, url: str | None = None, status_code: int = 0):
        super().__init__(message, url=url)
        self.status_code = status_code


class RedirectLoopError(FetchError):
    """Raised when a fetch exceeds the redirect hop limit."""

    def __init__(self, message: str, url: str | None = None, hops: int = 0):
        super().__init__(message, url=url)
        self.hops = hops


class ParseError(Exception):
    """Raised when a structured feed cannot be decoded into products."""

    pass


async def call_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 1,
    min_wait: float = 0.5,
    max_wait: float = 5.0,
    multiplier: float = 2.0,
) -> T:
    """Run ``operation``, retrying on :class:`NetworkError` up to ``max_attempts`` total attempts.

    HTTP status errors and redirect loops are never retried. With the default of
    one attempt the first failure propagates unchanged.
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=multiplier, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(NetworkError),
        reraise=True,
    ):
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                logger.info("Retrying fetch", attempt=attempt.retry_state.attempt_number, max_attempts=max_attempts)
            return await operation()

    raise AssertionError("unreachable")  # pragma: no cover
