"""Service options that know how to build the storage endpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from blobchannel.config_manager.channel_config import ChannelConfig
from blobchannel.config_manager.config import ConfigManager
from blobchannel.storage_rpc import StorageRpc

logger = logging.getLogger(__name__)


class StorageOptions(BaseModel):
    """Options shared by every channel talking to one storage service.

    The endpoint is built lazily by ``rpc_factory`` and cached on the
    instance, so channels restored from a snapshot reuse the handle of the
    options they were captured with. The cached handle is process-local: it
    is not serialized and does not take part in equality.

    Attributes:
        project_id: Optional project the uploads are billed to.
        rpc_factory: Called with these options to build the StorageRpc.
    """

    model_config = ConfigDict(frozen=True)

    project_id: str | None = None
    rpc_factory: Callable[..., StorageRpc] = Field(exclude=True, repr=False)

    _rpc: StorageRpc | None = PrivateAttr(default=None)

    @classmethod
    def from_config(
        cls,
        rpc_factory: Callable[..., StorageRpc],
        config: ChannelConfig | None = None,
    ) -> StorageOptions:
        """Build options from channel configuration.

        Args:
            rpc_factory: Called with the options to build the StorageRpc.
            config: Configuration to use. Resolved from the environment when
                omitted.

        Returns:
            The storage options.
        """
        config = config or ConfigManager().resolve_effective_config()
        return cls(project_id=config.project_id, rpc_factory=rpc_factory)

    def get_rpc(self) -> StorageRpc:
        """Return the storage endpoint, creating it on first use."""
        if self._rpc is None:
            logger.debug("Creating storage rpc: project_id=%s", self.project_id)
            self._rpc = self.rpc_factory(self)
        return self._rpc

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, StorageOptions):
            return NotImplemented
        return (
            self.project_id == other.project_id
            and self.rpc_factory == other.rpc_factory
        )

    def __hash__(self) -> int:
        return hash((self.project_id, self.rpc_factory))
