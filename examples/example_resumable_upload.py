import logging
import os
import uuid

from blobchannel import (
    MIN_CHUNK_SIZE,
    BlobInfo,
    BlobWriteChannel,
    StorageOptions,
    StorageRpc,
    WriteChannelState,
)

logging.basicConfig(level=logging.INFO)


class InMemoryStorageRpc(StorageRpc):
    """Stores uploaded objects in a dict, keyed by upload id."""

    def __init__(self):
        self.sessions = {}
        self.objects = {}

    def open(self, blob_info, options):
        upload_id = uuid.uuid4().hex
        self.sessions[upload_id] = (blob_info, bytearray())
        return upload_id

    def open_signed_url(self, signed_url):
        return self.open(BlobInfo.from_signed_url(signed_url), {})

    def write(self, upload_id, buffer, buffer_offset, position, length, last):
        blob_info, data = self.sessions[upload_id]
        assert position == len(data), "Upload position mismatch"
        data.extend(buffer[buffer_offset : buffer_offset + length])
        if last:
            self.objects[blob_info.blob_id] = bytes(data)
            del self.sessions[upload_id]


backend = InMemoryStorageRpc()


def make_rpc(options):
    return backend


def main():
    options = StorageOptions(project_id="example", rpc_factory=make_rpc)
    payload = os.urandom(5 * MIN_CHUNK_SIZE + 1234)

    channel = BlobWriteChannel.open(
        options, BlobInfo(bucket="example-bucket", name="random.bin")
    )
    channel.chunk_size = 2 * MIN_CHUNK_SIZE
    channel.write(payload[: 3 * MIN_CHUNK_SIZE])

    # Pretend the process stops here and a new one picks up the upload
    saved = channel.capture().to_json()
    resumed = WriteChannelState.from_json(saved, options).restore()
    resumed.write(payload[3 * MIN_CHUNK_SIZE :])
    resumed.close()

    uploaded = backend.objects["example-bucket/random.bin"]
    print("Uploaded", len(uploaded), "bytes, intact:", uploaded == payload)


if __name__ == "__main__":
    main()
