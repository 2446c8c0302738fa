"""Classification of transient storage failures and the open-session retry.

Only the opening of an upload session is retried here, and only once. Chunk
uploads are never retried by the write channel; backoff timing belongs to
the transport.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

import requests

from blobchannel.const import OPEN_RETRY_ATTEMPTS, RETRYABLE_STATUS_CODES
from blobchannel.exceptions import ClosedChannelError, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    requests.exceptions.ChunkedEncodingError,
)


def is_retryable(exc: BaseException) -> bool:
    """Decide whether a failure is a transient network fault.

    Socket-level faults (connection reset, refused, aborted, broken pipe,
    timeouts) and retryable HTTP statuses are transient. A StorageError is
    transient when flagged so, when its status code is retryable, or when
    the failure it wraps is transient.

    Args:
        exc: The failure to classify.

    Returns:
        True if retrying the operation may succeed.
    """
    if isinstance(exc, ClosedChannelError):
        return False
    if isinstance(exc, StorageError):
        if exc.retryable or exc.code in RETRYABLE_STATUS_CODES:
            return True
        return exc.__cause__ is not None and is_retryable(exc.__cause__)
    if isinstance(exc, requests.exceptions.HTTPError):
        response = exc.response
        return response is not None and response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, _TRANSIENT_ERRORS)


def call_with_open_retry(operation: Callable[[], T], description: str) -> T:
    """Run ``operation``, retrying a transient failure exactly once.

    Args:
        operation: Callable that opens an upload session.
        description: What the operation does, used in logs and error messages.

    Returns:
        Whatever ``operation`` returns.

    Raises:
        StorageError: If the operation fails fatally, or fails again after
            the retry. Non-storage failures are wrapped, with the original
            exception as ``__cause__``.
    """
    attempt = 0
    while True:
        try:
            return operation()
        except Exception as exc:
            if attempt < OPEN_RETRY_ATTEMPTS and is_retryable(exc):
                attempt += 1
                logger.warning(
                    "Failed to %s (attempt %d/%d), retrying: %r",
                    description,
                    attempt,
                    OPEN_RETRY_ATTEMPTS + 1,
                    exc,
                )
                continue
            error = StorageError.wrap(exc, f"Failed to {description}: {exc!r}")
            if error is exc:
                raise
            raise error from exc
