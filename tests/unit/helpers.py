"""Shared constants for write channel tests."""

import os

from blobchannel.const import MIN_CHUNK_SIZE
from blobchannel.models import BlobInfo

BUCKET_NAME = "b"
BLOB_NAME = "n"
UPLOAD_ID = "uploadid"
BLOB_INFO = BlobInfo(bucket=BUCKET_NAME, name=BLOB_NAME)
CUSTOM_CHUNK_SIZE = 4 * MIN_CHUNK_SIZE
SIGNED_URL = (
    "http://www.test.com/test-bucket/test1.txt?GoogleAccessId=testClient-test@test.com"
    "&Expires=1553839761&Signature=MJUBXAZ7"
)


def random_bytes(size: int) -> bytes:
    return os.urandom(size)
