"""Tests for the streaming content hasher."""

import os
from pathlib import Path

import pytest

from treeprint.core.hasher import HASH_HEX_WIDTH, hash_bytes, hash_file

SHA1_EMPTY = "da39a3ee5e6b4b0d3255bfef95601890afd80709"
SHA1_ABC = "a9993e364706816aba3e25717850c26c9cd0d89d"


class TestHashFile:
    """Tests for hash_file."""

    def test_known_digest(self, tmp_path: Path) -> None:
        """Digest should match the SHA-1 of the content."""
        path = tmp_path / "abc.txt"
        path.write_bytes(b"abc")
        assert hash_file(path) == SHA1_ABC

    def test_empty_file(self, tmp_path: Path) -> None:
        """Empty files hash to the digest of the empty byte stream."""
        path = tmp_path / "empty"
        path.write_bytes(b"")
        assert hash_file(path) == SHA1_EMPTY

    def test_fixed_width_lowercase(self, tmp_path: Path) -> None:
        """Digest should be fixed-width lowercase hex."""
        path = tmp_path / "data.bin"
        path.write_bytes(os.urandom(1000))
        digest = hash_file(path)
        assert len(digest) == HASH_HEX_WIDTH
        assert digest == digest.lower()
        int(digest, 16)

    def test_chunk_size_does_not_change_digest(self, tmp_path: Path) -> None:
        """Reading in small chunks should give the same digest as one read."""
        data = os.urandom(10_000)
        path = tmp_path / "data.bin"
        path.write_bytes(data)
        assert hash_file(path, chunk_size=7) == hash_bytes(data)
        assert hash_file(path, chunk_size=1 << 20) == hash_bytes(data)

    def test_no_state_between_calls(self, tmp_path: Path) -> None:
        """Hashing one file must not affect the digest of the next."""
        a = tmp_path / "a"
        b = tmp_path / "b"
        a.write_bytes(b"first file")
        b.write_bytes(b"abc")
        hash_file(a)
        assert hash_file(b) == SHA1_ABC
        assert hash_file(b) == SHA1_ABC

    def test_missing_file(self, tmp_path: Path) -> None:
        """Missing files raise an IOError."""
        with pytest.raises(IOError):
            hash_file(tmp_path / "nope")

    def test_directory(self, tmp_path: Path) -> None:
        """Directories are not regular files."""
        with pytest.raises(IOError):
            hash_file(tmp_path)

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="needs FIFOs")
    def test_fifo_rejected(self, tmp_path: Path) -> None:
        """Special files are rejected without being opened."""
        fifo = tmp_path / "pipe"
        os.mkfifo(fifo)
        with pytest.raises(IOError):
            hash_file(fifo)


class TestHashBytes:
    """Tests for hash_bytes."""

    def test_matches_known_values(self) -> None:
        assert hash_bytes(b"") == SHA1_EMPTY
        assert hash_bytes(b"abc") == SHA1_ABC
