from unittest.mock import MagicMock

import pytest

from blobchannel.storage_options import StorageOptions
from blobchannel.storage_rpc import StorageRpc
from tests.unit.helpers import UPLOAD_ID


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep channel configuration from leaking in through the environment."""
    monkeypatch.delenv("BLOBCHANNEL_CHUNK_SIZE", raising=False)
    monkeypatch.delenv("BLOBCHANNEL_PROJECT_ID", raising=False)


@pytest.fixture
def storage_rpc() -> MagicMock:
    """Mock storage endpoint that hands out a fixed upload id."""
    rpc = MagicMock(spec=StorageRpc)
    rpc.open.return_value = UPLOAD_ID
    rpc.open_signed_url.return_value = UPLOAD_ID
    return rpc


@pytest.fixture
def rpc_factory(storage_rpc: MagicMock) -> MagicMock:
    return MagicMock(return_value=storage_rpc)


@pytest.fixture
def options(rpc_factory: MagicMock) -> StorageOptions:
    return StorageOptions(project_id="projectid", rpc_factory=rpc_factory)
