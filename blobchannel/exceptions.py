"""Exception classes for resumable blob writes."""

from __future__ import annotations


class StorageError(Exception):
    """Base error for storage operations.

    Carries an optional HTTP-like status code and a flag telling the retry
    classifier that the failure is transient. When an error is wrapped, the
    original failure is kept as ``__cause__``.
    """

    DEFAULT_MESSAGE = "Storage operation failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        code: int | None = None,
        retryable: bool = False,
    ) -> None:
        """Initialize StorageError.

        Args:
            message: Description of the failure. An empty message is replaced
                by a generic one so the error always reads as something.
            code: Optional status code reported by the storage backend.
            retryable: Whether the failure is known to be transient.
        """
        super().__init__(message or self.DEFAULT_MESSAGE)
        self.code = code
        self.retryable = retryable

    @property
    def message(self) -> str:
        """The error message."""
        return str(self.args[0])

    @classmethod
    def wrap(cls, exc: BaseException, message: str) -> StorageError:
        """Return ``exc`` as a StorageError.

        Storage errors are returned unchanged. Anything else becomes a new
        StorageError whose ``__cause__`` is the original exception.

        Args:
            exc: The failure to wrap.
            message: Message for the new error.

        Returns:
            A StorageError describing ``exc``.
        """
        if isinstance(exc, StorageError):
            return exc
        error = cls(message)
        error.__cause__ = exc
        return error


class ClosedChannelError(StorageError):
    """Raised when writing to a channel that has been closed."""

    def __init__(self, message: str = "Write channel is closed") -> None:
        """Initialize ClosedChannelError.

        Args:
            message: Description of the misuse.
        """
        super().__init__(message)


class InvalidChunkSizeError(StorageError, ValueError):
    """Raised when a chunk size breaks the upload protocol constraints."""
