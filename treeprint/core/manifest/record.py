"""
Fingerprint record and manifest models.

A manifest is an ordered list of records; only the path to hash mapping
matters when verifying.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from treeprint.core.hasher import HASH_HEX_WIDTH
from treeprint.errors import ManifestFormatError

_HASH_RE = re.compile(rf"[0-9a-f]{{{HASH_HEX_WIDTH}}}")


class FingerprintRecord(BaseModel):
    """Digest of one file, keyed by its path relative to the manifest root."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(description="Lowercase hex SHA-1 of the file content")
    relative_path: str = Field(description="POSIX-style path relative to the root")

    @field_validator("hash")
    @classmethod
    def _check_hash(cls, value: str) -> str:
        if not _HASH_RE.fullmatch(value):
            raise ValueError(
                f"hash must be {HASH_HEX_WIDTH} lowercase hex characters, got {value!r}"
            )
        return value

    @field_validator("relative_path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        if not value:
            raise ValueError("relative_path must not be empty")
        if "\n" in value:
            raise ValueError(f"relative_path contains a newline: {value!r}")
        # A trailing CR would be read back as part of a CRLF terminator
        if value.endswith("\r"):
            raise ValueError(f"relative_path ends with a carriage return: {value!r}")
        return value

    @classmethod
    def create(cls, hash: str, relative_path: str) -> FingerprintRecord:
        """
        Create a record, reporting invalid values as ManifestFormatError.

        Args:
            hash: Hex digest.
            relative_path: Path relative to the manifest root.

        Returns:
            Validated record.
        """
        try:
            return cls(hash=hash, relative_path=relative_path)
        except ValidationError as e:
            reason = "; ".join(err["msg"] for err in e.errors())
            raise ManifestFormatError(reason) from e


class Manifest(BaseModel):
    """Ordered fingerprint records for one directory tree."""

    model_config = ConfigDict(frozen=True)

    records: tuple[FingerprintRecord, ...] = Field(
        default=(), description="Records in traversal order"
    )

    def __len__(self) -> int:
        return len(self.records)

    def as_mapping(self) -> dict[str, str]:
        """Map relative path to hash; later duplicates win."""
        return {r.relative_path: r.hash for r in self.records}

    def paths(self) -> list[str]:
        """Relative paths in record order."""
        return [r.relative_path for r in self.records]

    def digest(self) -> str:
        """Order-independent digest of the path to hash mapping."""
        from treeprint.core.manifest.digest import compute_manifest_digest

        return compute_manifest_digest(self.as_mapping())
