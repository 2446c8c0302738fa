"""Pydantic model for write channel configuration."""

from pydantic import BaseModel, field_validator

from blobchannel.config_manager.helpers import validate_chunk_size
from blobchannel.const import DEFAULT_CHUNK_SIZE


class ChannelConfig(BaseModel):
    """Configuration options for blob write channels.

    Attributes:
        chunk_size: bytes uploaded per chunk; a multiple of 256 KiB.
        project_id: project the uploads are billed to.
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    project_id: str | None = None

    @field_validator("chunk_size")
    @classmethod
    def _check_chunk_size(cls, value: int) -> int:
        return validate_chunk_size(value)
