"""Constants for resumable blob uploads."""

import os

# Resumable upload chunks must be a multiple of 256 KiB
MIN_CHUNK_SIZE = 256 * 1024
DEFAULT_CHUNK_SIZE = 60 * MIN_CHUNK_SIZE  # (15 MiB)

# Retries after the first failed attempt to open an upload session
OPEN_RETRY_ATTEMPTS = 1
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

ENV_PREFIX = "BLOBCHANNEL_"
LOG_UPLOAD_ID_MAX_CHARS = int(os.getenv("BLOBCHANNEL_LOG_UPLOAD_ID_MAX_CHARS", "80"))
