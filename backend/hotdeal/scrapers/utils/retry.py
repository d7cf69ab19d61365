"""Retry utilities with exponential backoff for HTTP requests."""

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)


logger = structlog.get_logger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_transient_http_error(exc: BaseException) -> bool:
    """Return True for errors worth retrying: timeouts, network errors, 5xx/429."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, (httpx.TimeoutException, httpx.NetworkError))


def log_before_retry(retry_state: RetryCallState) -> None:
    """Log a pending retry through the decorated method owner's logger.

    Decorated methods receive ``self`` first; when it carries a ``logger``
    the run's level filter and renderer apply to retry warnings too.
    """
    owner = retry_state.args[0] if retry_state.args else None
    log = getattr(owner, "logger", None) or logger

    error = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    log.warning(
        "http_retry",
        function=getattr(retry_state.fn, "__name__", "unknown"),
        attempt=retry_state.attempt_number,
        wait_seconds=round(wait, 2),
        error=str(error),
    )


# Reusable retry decorator for listing, detail and image fetches (httpx)
http_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception(is_transient_http_error),
    before_sleep=log_before_retry,
    reraise=True,
)
