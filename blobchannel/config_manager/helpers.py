"""Helpers for parsing and validating chunk sizes."""

import re

from blobchannel.const import MIN_CHUNK_SIZE
from blobchannel.exceptions import InvalidChunkSizeError

_BYTE_UNITS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
}
_BYTE_VALUE_RE = re.compile(r"(\d+)\s*([a-z]*)")


def parse_bytes(value: int | str) -> int:
    """Parse a byte quantity from an integer or unit-suffixed string.

    Supported string units (case-insensitive):
        b, k, kb, m, mb, g, gb

    Args:
        value: Raw byte value as an ``int`` or string with an optional unit
            suffix.

    Returns:
        The parsed value in bytes.

    Raises:
        ValueError: If the input cannot be parsed or contains an unknown unit.
    """
    if isinstance(value, int):
        return value

    match = _BYTE_VALUE_RE.fullmatch(str(value).strip().lower())
    if match is None:
        raise ValueError(f"Invalid byte value: {value!r}")
    number, unit = match.groups()
    if unit not in _BYTE_UNITS:
        raise ValueError(f"Unknown byte unit in value: {value!r}")
    return int(number) * _BYTE_UNITS[unit]


def validate_chunk_size(chunk_size: int) -> int:
    """Check that ``chunk_size`` is a positive multiple of MIN_CHUNK_SIZE.

    Args:
        chunk_size: Candidate chunk size in bytes.

    Returns:
        The chunk size, unchanged.

    Raises:
        InvalidChunkSizeError: If the value breaks the constraint.
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        raise InvalidChunkSizeError(
            f"Chunk size must be an integer, got {type(chunk_size).__name__}"
        )
    if chunk_size <= 0 or chunk_size % MIN_CHUNK_SIZE != 0:
        raise InvalidChunkSizeError(
            f"Chunk size must be a positive multiple of {MIN_CHUNK_SIZE} bytes, "
            f"got {chunk_size}"
        )
    return chunk_size


def align_chunk_size(size: int) -> int:
    """Round ``size`` up to the next multiple of MIN_CHUNK_SIZE.

    Args:
        size: Requested chunk size in bytes.

    Returns:
        The smallest valid chunk size not below ``size``.

    Raises:
        ValueError: If ``size`` is not positive.
    """
    if size <= 0:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return -(-size // MIN_CHUNK_SIZE) * MIN_CHUNK_SIZE
