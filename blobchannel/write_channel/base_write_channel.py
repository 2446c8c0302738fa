"""Buffered, chunked write channel.

This module provides the chunk buffer and the flush/close protocol shared by
resumable write channels. Bytes handed to ``write`` are copied into a chunk
buffer; every time the buffer fills it is flushed as one non-final chunk, and
``close`` flushes whatever remains as the final chunk.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Any

from blobchannel.config_manager.helpers import validate_chunk_size
from blobchannel.const import DEFAULT_CHUNK_SIZE
from blobchannel.exceptions import ClosedChannelError, InvalidChunkSizeError

logger = logging.getLogger(__name__)


class BaseWriteChannel(ABC):
    """Accumulates written bytes and flushes them in fixed-size chunks.

    The position only advances by bytes that were actually flushed; bytes
    sitting in the buffer do not count. Subclasses transmit chunks by
    implementing ``flush_buffer``.
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        position: int = 0,
        buffered: bytes | None = None,
        is_open: bool = True,
    ) -> None:
        """Initialize the write channel.

        Args:
            chunk_size: Bytes per uploaded chunk, a multiple of 256 KiB.
            position: Bytes already flushed to the backend.
            buffered: Bytes written but not yet flushed. A full chunk is allowed;
                it is sent before any further bytes are accepted.
            is_open: Whether the channel still accepts writes.

        Raises:
            InvalidChunkSizeError: If ``chunk_size`` is invalid or ``buffered``
                is larger than one chunk.
            ValueError: If ``position`` is negative.
        """
        self._chunk_size = validate_chunk_size(chunk_size)
        if position < 0:
            raise ValueError(f"Position must not be negative, got {position}")
        self._position = position
        self._is_open = is_open
        self._buffer: bytearray | None = None
        self._limit = 0

        if buffered and is_open:
            if len(buffered) > self._chunk_size:
                raise InvalidChunkSizeError(
                    f"Buffered bytes ({len(buffered)}) must not exceed "
                    f"the chunk size ({self._chunk_size})"
                )
            buffer = self._ensure_buffer()
            buffer[: len(buffered)] = buffered
            self._limit = len(buffered)

    @property
    def chunk_size(self) -> int:
        """Number of bytes uploaded per non-final chunk."""
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, chunk_size: int) -> None:
        self._check_open()
        if self._position or self._limit:
            raise InvalidChunkSizeError(
                "Chunk size cannot change after data has been written"
            )
        self._chunk_size = validate_chunk_size(chunk_size)
        self._buffer = None

    @property
    def position(self) -> int:
        """Bytes flushed to the backend so far."""
        return self._position

    @property
    def buffered_bytes(self) -> int:
        """Bytes written but not yet flushed."""
        return self._limit

    @property
    def is_open(self) -> bool:
        """Whether the channel still accepts writes."""
        return self._is_open

    def _check_open(self) -> None:
        if not self._is_open:
            raise ClosedChannelError()

    def _ensure_buffer(self) -> bytearray:
        if self._buffer is None:
            self._buffer = bytearray(self._chunk_size)
        return self._buffer

    def _buffered_copy(self) -> bytes:
        if self._buffer is None:
            return b""
        return bytes(memoryview(self._buffer)[: self._limit])

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write bytes to the channel.

        Bytes are buffered until a full chunk is available. A single call
        that supplies more than one chunk flushes each full chunk in turn.

        Args:
            data: Bytes-like object to write.

        Returns:
            Number of bytes consumed, always ``len(data)`` on success.

        Raises:
            ClosedChannelError: If the channel has been closed.
            Exception: Whatever the backend raises while flushing a chunk.
        """
        self._check_open()
        view = memoryview(data).cast("B")
        total = len(view)

        # A previous flush of this buffer failed; send it before taking more
        if self._limit == self._chunk_size:
            self.flush(final=False)

        written = 0
        while written < total:
            buffer = self._ensure_buffer()
            count = min(self._chunk_size - self._limit, total - written)
            buffer[self._limit : self._limit + count] = view[written : written + count]
            self._limit += count
            written += count
            if self._limit == self._chunk_size:
                self.flush(final=False)
        return written

    def flush(self, final: bool) -> None:
        """Send the buffered bytes to the backend as one chunk.

        The position advances and the buffer empties only once the backend
        has accepted the chunk.

        Args:
            final: Whether this is the last chunk of the object.
        """
        length = self._limit
        self.flush_buffer(length, final)
        self._position += length
        self._limit = 0

    def close(self) -> None:
        """Flush the remaining bytes as the final chunk and close the channel.

        Closing an already closed channel does nothing.
        """
        if not self._is_open:
            return
        self.flush(final=True)
        self._is_open = False
        self._buffer = None
        logger.debug("Write channel closed at position %d", self._position)

    def __enter__(self) -> BaseWriteChannel:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        # Leave the upload unfinalized when the caller failed mid-stream
        if exc_type is None:
            self.close()

    @abstractmethod
    def flush_buffer(self, length: int, last: bool) -> None:
        """Transmit the first ``length`` buffered bytes as one chunk."""
        ...

    @abstractmethod
    def capture(self) -> Any:
        """Return an immutable snapshot of the channel state."""
        ...
