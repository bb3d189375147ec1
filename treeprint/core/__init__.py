"""Core utilities: content hashing, manifest records and canonical JSON."""

from treeprint.core.hasher import HASH_HEX_WIDTH, hash_bytes, hash_file

__all__ = [
    "HASH_HEX_WIDTH",
    "hash_bytes",
    "hash_file",
]
