"""
Streaming content hasher.

Computes SHA-1 digests of whole files, read once front to back in bounded
chunks so that files larger than memory can be fingerprinted.
"""

from __future__ import annotations

import errno
import hashlib
import os
import stat
from pathlib import Path

# SHA-1 is 160 bits
HASH_HEX_WIDTH = 40
DEFAULT_CHUNK_SIZE = 4 * 1024 * 1024


def hash_file(path: Path | str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """
    Compute the content digest of a regular file.

    Every call uses a fresh accumulator, so repeated calls never share state.

    Args:
        path: Path to the file.
        chunk_size: Number of bytes read per chunk.

    Returns:
        Lowercase hex digest, HASH_HEX_WIDTH characters long.

    Raises:
        OSError: If the path is missing, is not a regular file, or
            cannot be read.
    """
    # Checked before opening: opening a FIFO for reading would block
    mode = os.stat(path).st_mode
    if stat.S_ISDIR(mode):
        raise IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
    if not stat.S_ISREG(mode):
        raise OSError(errno.EINVAL, "Not a regular file", str(path))

    hasher = hashlib.sha1()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def hash_bytes(data: bytes) -> str:
    """Compute the digest of an in-memory byte string."""
    return hashlib.sha1(data).hexdigest()
