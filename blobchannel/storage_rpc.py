"""Interface of the remote storage endpoint used by write channels."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from blobchannel.models import BlobInfo


class StorageRpc(ABC):
    """Strategy interface for the resumable upload backend.

    Implementations own the transport. They must:
      - Return an opaque upload id from ``open``/``open_signed_url``.
      - Place exactly ``length`` bytes of ``buffer`` (starting at
        ``buffer_offset``) at ``position`` in the object on ``write``.
      - Treat ``last=True`` as the end of the object.
    """

    @abstractmethod
    def open(self, blob_info: BlobInfo, options: Mapping[str, Any]) -> str:
        """Start a resumable upload session for ``blob_info``."""
        ...

    @abstractmethod
    def open_signed_url(self, signed_url: str) -> str:
        """Start a resumable upload session through a pre-signed URL."""
        ...

    @abstractmethod
    def write(
        self,
        upload_id: str,
        buffer: bytes,
        buffer_offset: int,
        position: int,
        length: int,
        last: bool,
    ) -> None:
        """Upload ``length`` bytes of ``buffer`` at ``position``."""
        ...
