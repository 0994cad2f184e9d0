"""
Data Integrity Utilities.

Content digests used to validate freshly downloaded buffers and files that
already sit in the local cache. Both helpers produce the same lowercase
hexadecimal MD5 string for the same content.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from ..paths import DEFAULT_CHUNK_SIZE


def digest(data: bytes) -> str:
    """
    Calculates the MD5 digest of an in-memory byte buffer.

    Args:
        data (bytes): Content to hash.

    Returns:
        str: The hexadecimal MD5 hash.
    """
    return hashlib.md5(data, usedforsecurity=False).hexdigest()


def md5_checksum(path: Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Calculates the MD5 checksum of a file using buffered reading.

    Args:
        path (Path): Path to the file to verify.
        chunk_size (int): Read buffer size in bytes.

    Returns:
        str: The calculated hexadecimal MD5 hash.
    """
    hash_md5 = hashlib.md5(usedforsecurity=False)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hash_md5.update(chunk)
    return hash_md5.hexdigest()
