"""Resolve channel configuration from defaults, environment, and overrides."""

from __future__ import annotations

import logging
import os
from typing import Any

from blobchannel.config_manager.channel_config import ChannelConfig
from blobchannel.config_manager.helpers import parse_bytes
from blobchannel.const import ENV_PREFIX

logger = logging.getLogger(__name__)

_ENV_MAP: dict[str, str] = {
    "chunk_size": f"{ENV_PREFIX}CHUNK_SIZE",
    "project_id": f"{ENV_PREFIX}PROJECT_ID",
}


class ConfigManager:
    """Build effective channel configuration from defaults, env, and overrides."""

    def __init__(self, base_config: ChannelConfig | None = None) -> None:
        """Initialise ConfigManager.

        Args:
            base_config: Configuration to start from. Defaults to
                ``ChannelConfig()``.
        """
        self.base_config = base_config or ChannelConfig()

    def _read_env_overrides(self) -> dict[str, Any]:
        """Read channel configuration overrides from environment variables.

        Returns:
            A dictionary of configuration field names to override values.
        """
        overrides: dict[str, Any] = {}

        for field_name, env_var_name in _ENV_MAP.items():
            env_value = os.getenv(env_var_name)
            if env_value is None:
                continue

            if field_name == "chunk_size":
                try:
                    overrides[field_name] = parse_bytes(env_value)
                except ValueError:
                    logger.warning(
                        "Ignoring unparsable %s=%r", env_var_name, env_value
                    )
                    continue
            else:
                overrides[field_name] = env_value

        return overrides

    def resolve_effective_config(
        self, overrides: dict[str, Any] | None = None
    ) -> ChannelConfig:
        """Resolve the effective channel configuration.

        Args:
            overrides: Optional explicit overrides, applied last.

        Returns:
            The resolved and validated ``ChannelConfig``.

        Raises:
            pydantic.ValidationError: If the merged configuration is invalid.
        """
        merged = self.base_config.model_dump()
        merged.update(self._read_env_overrides())
        if overrides is not None:
            merged.update(overrides)
        return ChannelConfig.model_validate(merged)
