from .const import DEFAULT_CHUNK_SIZE, MIN_CHUNK_SIZE
from .exceptions import ClosedChannelError, InvalidChunkSizeError, StorageError
from .models import BlobInfo, UploadOptions
from .storage_options import StorageOptions
from .storage_rpc import StorageRpc
from .write_channel.blob_write_channel import BlobWriteChannel
from .write_channel.state import WriteChannelState

__version__ = "0.3.0"

__all__ = [
    "BlobInfo",
    "BlobWriteChannel",
    "ClosedChannelError",
    "DEFAULT_CHUNK_SIZE",
    "InvalidChunkSizeError",
    "MIN_CHUNK_SIZE",
    "StorageError",
    "StorageOptions",
    "StorageRpc",
    "UploadOptions",
    "WriteChannelState",
]
