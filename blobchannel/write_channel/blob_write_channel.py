"""Resumable write channel for a single blob.

This module provides BlobWriteChannel, which opens a resumable upload session
against the storage endpoint and uploads buffered chunks through it. A channel
can be captured into a WriteChannelState and restored later, possibly in a
different process, to continue the same session at the same byte offset.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from blobchannel.config_manager.config import ConfigManager
from blobchannel.config_manager.helpers import validate_chunk_size
from blobchannel.const import DEFAULT_CHUNK_SIZE, LOG_UPLOAD_ID_MAX_CHARS
from blobchannel.exceptions import StorageError
from blobchannel.models import BlobInfo, UploadOptions
from blobchannel.retry import call_with_open_retry
from blobchannel.storage_options import StorageOptions
from blobchannel.storage_rpc import StorageRpc
from blobchannel.write_channel.base_write_channel import BaseWriteChannel

if TYPE_CHECKING:
    from blobchannel.write_channel.state import WriteChannelState

logger = logging.getLogger(__name__)


def _short(upload_id: str) -> str:
    if len(upload_id) > LOG_UPLOAD_ID_MAX_CHARS:
        return upload_id[:LOG_UPLOAD_ID_MAX_CHARS] + "..."
    return upload_id


def _resolve_chunk_size(chunk_size: int | None) -> int:
    if chunk_size is not None:
        return validate_chunk_size(chunk_size)
    return ConfigManager().resolve_effective_config().chunk_size


class BlobWriteChannel(BaseWriteChannel):
    """Write channel uploading to one resumable upload session.

    Use ``open`` or ``open_signed_url`` to start a new session. The
    constructor itself never talks to the backend; it is used by those
    factories and by ``WriteChannelState.restore``.
    """

    def __init__(
        self,
        options: StorageOptions,
        blob_info: BlobInfo,
        upload_id: str,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        position: int = 0,
        buffered: bytes | None = None,
        is_open: bool = True,
    ) -> None:
        """Initialize a channel bound to an existing upload session.

        Args:
            options: Storage options providing the backend endpoint.
            blob_info: The object being uploaded.
            upload_id: Upload session token returned by the backend.
            chunk_size: Bytes per uploaded chunk, a multiple of 256 KiB.
            position: Bytes already flushed to the session.
            buffered: Bytes written but not yet flushed.
            is_open: Whether the channel still accepts writes.
        """
        super().__init__(
            chunk_size=chunk_size,
            position=position,
            buffered=buffered,
            is_open=is_open,
        )
        self._options = options
        self._blob_info = blob_info
        self._upload_id = upload_id

    @classmethod
    def open(
        cls,
        options: StorageOptions,
        blob_info: BlobInfo,
        upload_options: UploadOptions | None = None,
        chunk_size: int | None = None,
    ) -> BlobWriteChannel:
        """Open a new resumable upload session for ``blob_info``.

        A transient network failure is retried once.

        Args:
            options: Storage options providing the backend endpoint.
            blob_info: The object to upload.
            upload_options: Backend-specific options for the session.
            chunk_size: Bytes per uploaded chunk. Defaults to the configured
                chunk size (see ConfigManager).

        Returns:
            An open channel at position 0.

        Raises:
            StorageError: If the session cannot be opened.
            InvalidChunkSizeError: If ``chunk_size`` is invalid.
        """
        chunk_size = _resolve_chunk_size(chunk_size)
        rpc_params = (upload_options or UploadOptions()).as_rpc_params()
        rpc = options.get_rpc()
        upload_id = call_with_open_retry(
            lambda: rpc.open(blob_info, rpc_params),
            f"open upload session for {blob_info.blob_id}",
        )
        logger.info(
            "Opened upload session: blob=%s upload_id=%s",
            blob_info.blob_id,
            _short(upload_id),
        )
        return cls(options, blob_info, upload_id, chunk_size=chunk_size)

    @classmethod
    def open_signed_url(
        cls,
        options: StorageOptions,
        signed_url: str,
        chunk_size: int | None = None,
    ) -> BlobWriteChannel:
        """Open a new resumable upload session through a pre-signed URL.

        The target object is derived from the URL path. A transient network
        failure is retried once, as for ``open``.

        Args:
            options: Storage options providing the backend endpoint.
            signed_url: Pre-signed upload URL.
            chunk_size: Bytes per uploaded chunk. Defaults to the configured
                chunk size (see ConfigManager).

        Returns:
            An open channel at position 0.

        Raises:
            StorageError: If the URL is malformed or the session cannot be opened.
            InvalidChunkSizeError: If ``chunk_size`` is invalid.
        """
        chunk_size = _resolve_chunk_size(chunk_size)
        try:
            blob_info = BlobInfo.from_signed_url(signed_url)
        except ValueError as exc:
            raise StorageError(str(exc)) from exc

        rpc = options.get_rpc()
        upload_id = call_with_open_retry(
            lambda: rpc.open_signed_url(signed_url),
            f"open upload session from signed URL for {blob_info.blob_id}",
        )
        logger.info(
            "Opened upload session from signed URL: blob=%s upload_id=%s",
            blob_info.blob_id,
            _short(upload_id),
        )
        return cls(options, blob_info, upload_id, chunk_size=chunk_size)

    @property
    def options(self) -> StorageOptions:
        """Storage options the channel was created with."""
        return self._options

    @property
    def blob_info(self) -> BlobInfo:
        """The object being uploaded."""
        return self._blob_info

    @property
    def upload_id(self) -> str:
        """Upload session token."""
        return self._upload_id

    @property
    def _rpc(self) -> StorageRpc:
        return self._options.get_rpc()

    def flush_buffer(self, length: int, last: bool) -> None:
        """Upload the first ``length`` buffered bytes at the current position.

        Args:
            length: Number of valid bytes in the buffer.
            last: Whether this chunk ends the object.
        """
        logger.debug(
            "Upload chunk: blob=%s position=%d bytes=%d final=%s",
            self._blob_info.blob_id,
            self._position,
            length,
            last,
        )
        self._rpc.write(
            self._upload_id,
            self._buffered_copy(),
            0,
            self._position,
            length,
            last,
        )

    def close(self) -> None:
        """Upload the remaining bytes as the final chunk and close the channel."""
        was_open = self._is_open
        super().close()
        if was_open:
            logger.info(
                "Upload finalized: blob=%s total_bytes=%d",
                self._blob_info.blob_id,
                self._position,
            )

    def capture(self) -> WriteChannelState:
        """Capture the channel into an immutable, restorable snapshot.

        Capturing does not flush or otherwise change the channel.

        Returns:
            The snapshot of the current session state.
        """
        from blobchannel.write_channel.state import WriteChannelState

        return WriteChannelState(
            options=self._options,
            blob_info=self._blob_info,
            upload_id=self._upload_id,
            chunk_size=self._chunk_size,
            buffer=self._buffered_copy() if self._is_open else None,
            position=self._position,
            is_open=self._is_open,
        )
