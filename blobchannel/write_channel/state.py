"""Restorable snapshot of a blob write channel."""

from __future__ import annotations

import base64
import logging
from collections.abc import Iterator
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    field_serializer,
    field_validator,
    model_validator,
)

from blobchannel.config_manager.helpers import validate_chunk_size
from blobchannel.models import BlobInfo
from blobchannel.storage_options import StorageOptions
from blobchannel.write_channel.blob_write_channel import BlobWriteChannel

logger = logging.getLogger(__name__)

_PAYLOAD_ADAPTER = TypeAdapter(dict[str, Any])


class WriteChannelState(BaseModel):
    """Immutable state of a BlobWriteChannel.

    Equality, hashing and string form are defined by the field values, so
    two channels in the same state capture equal snapshots.

    Attributes:
        options: Storage options providing the backend endpoint.
        blob_info: The object being uploaded.
        upload_id: Upload session token.
        chunk_size: Bytes per uploaded chunk.
        buffer: Bytes written but not flushed, or None once closed.
        position: Bytes flushed to the session so far.
        is_open: Whether the channel accepts writes.
    """

    model_config = ConfigDict(frozen=True)

    options: StorageOptions
    blob_info: BlobInfo
    upload_id: str = Field(min_length=1)
    chunk_size: int
    buffer: bytes | None = None
    position: int = Field(default=0, ge=0)
    is_open: bool = True

    @field_validator("chunk_size")
    @classmethod
    def _check_chunk_size(cls, value: int) -> int:
        return validate_chunk_size(value)

    @field_validator("buffer", mode="before")
    @classmethod
    def _decode_buffer(cls, value: Any) -> Any:
        # Serialized snapshots carry the buffer base64 encoded
        if isinstance(value, str):
            return base64.b64decode(value, validate=True)
        return value

    @field_serializer("buffer", when_used="json")
    def _encode_buffer(self, value: bytes | None) -> str | None:
        if value is None:
            return None
        return base64.b64encode(value).decode("ascii")

    @model_validator(mode="after")
    def _check_buffer_fits(self) -> WriteChannelState:
        if self.buffer is not None and len(self.buffer) > self.chunk_size:
            raise ValueError(
                f"Buffered bytes ({len(self.buffer)}) must not exceed "
                f"the chunk size ({self.chunk_size})"
            )
        return self

    def __repr_args__(self) -> Iterator[tuple[str | None, Any]]:
        for name, value in super().__repr_args__():
            if name == "buffer" and value is not None:
                yield name, f"<{len(value)} bytes>"
            else:
                yield name, value

    def restore(self) -> BlobWriteChannel:
        """Rebuild a channel continuing the captured session.

        No new session is opened; the channel reuses the captured upload id
        and obtains the backend endpoint lazily from ``options``.

        Returns:
            A new, independent channel in the captured state.
        """
        logger.info(
            "Restoring write channel: blob=%s position=%d buffered=%d open=%s",
            self.blob_info.blob_id,
            self.position,
            len(self.buffer or b""),
            self.is_open,
        )
        return BlobWriteChannel(
            self.options,
            self.blob_info,
            self.upload_id,
            chunk_size=self.chunk_size,
            position=self.position,
            buffered=self.buffer,
            is_open=self.is_open,
        )

    def to_json(self) -> str:
        """Serialize the snapshot for another process.

        The storage options are left out; the loading process supplies its own.
        """
        return self.model_dump_json(exclude={"options"})

    @classmethod
    def from_json(cls, payload: str | bytes, options: StorageOptions) -> WriteChannelState:
        """Load a snapshot produced by ``to_json``.

        Args:
            payload: JSON produced by ``to_json``.
            options: Storage options to bind the snapshot to.

        Returns:
            The loaded snapshot.

        Raises:
            pydantic.ValidationError: If the payload is not a valid snapshot.
        """
        data = _PAYLOAD_ADAPTER.validate_json(payload)
        data["options"] = options
        return cls.model_validate(data)
