"""
Verifier: re-check a tree against its manifest.

Every recorded file is re-hashed. Changed, missing and unreadable files are
collected as mismatches; only a missing or malformed manifest is fatal.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field

from treeprint.config import FingerprintConfig
from treeprint.core.hasher import hash_file
from treeprint.core.manifest.codec import read_manifest
from treeprint.errors import NotFoundError

logger = logging.getLogger(__name__)


class CheckStatus(str, Enum):
    """Outcome of re-checking one file."""

    MATCH = "match"
    CHANGED = "changed"
    MISSING = "missing"
    UNREADABLE = "unreadable"


CheckCallback = Callable[[str, CheckStatus], None]


class Mismatch(BaseModel):
    """A recorded file whose current state disagrees with the manifest."""

    model_config = ConfigDict(frozen=True)

    relative_path: str = Field(description="Path as recorded in the manifest")
    status: CheckStatus = Field(description="Why the file does not match")
    recorded_hash: str = Field(description="Hash stored in the manifest")
    new_hash: str | None = Field(
        default=None, description="Hash computed now; None if the file could not be read"
    )
    error: str | None = Field(default=None, description="Read error, if any")


class VerificationResult(BaseModel):
    """Result of checking a tree; empty mismatches means the tree is intact."""

    model_config = ConfigDict(frozen=True)

    root: str = Field(description="Verified directory")
    checked: int = Field(default=0, description="Number of recorded files checked")
    mismatches: tuple[Mismatch, ...] = Field(
        default=(), description="Mismatching files in manifest order"
    )

    @property
    def ok(self) -> bool:
        return not self.mismatches

    def as_mapping(self) -> dict[str, str | None]:
        """Map each mismatching path to its new hash, None when unreadable."""
        return {m.relative_path: m.new_hash for m in self.mismatches}


def resolve_recorded_path(root: Path, relative_path: str) -> Path:
    """Turn a manifest path (always '/'-separated) into a host path under root."""
    return root.joinpath(*PurePosixPath(relative_path).parts)


class Verifier:
    """Checks a directory tree against the manifest stored inside it."""

    def __init__(
        self,
        config: FingerprintConfig | None = None,
        on_check: CheckCallback | None = None,
    ):
        """
        Initialize verifier.

        Args:
            config: Engine configuration; defaults apply when omitted.
            on_check: Called with each path and its outcome.
        """
        self.config = config or FingerprintConfig()
        self.on_check = on_check

    def check_file(self, root: Path, relative_path: str, recorded_hash: str) -> Mismatch | None:
        """Re-hash one recorded file; return a Mismatch unless it matches."""
        path = resolve_recorded_path(root, relative_path)
        try:
            current_hash = hash_file(path, self.config.chunk_size)
        except FileNotFoundError as e:
            logger.debug("Missing: %s", path)
            return Mismatch(
                relative_path=relative_path,
                status=CheckStatus.MISSING,
                recorded_hash=recorded_hash,
                error=e.strerror or str(e),
            )
        except OSError as e:
            logger.debug("Unreadable: %s (%s)", path, e)
            return Mismatch(
                relative_path=relative_path,
                status=CheckStatus.UNREADABLE,
                recorded_hash=recorded_hash,
                error=e.strerror or str(e),
            )

        if current_hash == recorded_hash:
            return None
        return Mismatch(
            relative_path=relative_path,
            status=CheckStatus.CHANGED,
            recorded_hash=recorded_hash,
            new_hash=current_hash,
        )

    def check(self, source_dir: Path | str) -> VerificationResult:
        """
        Verify every file recorded in the manifest of source_dir.

        Args:
            source_dir: Directory holding the manifest.

        Returns:
            VerificationResult listing every mismatching file.

        Raises:
            NotFoundError: If source_dir holds no manifest file.
            ManifestFormatError: If the manifest is malformed.
        """
        root = Path(source_dir).resolve()
        manifest_path = root / self.config.manifest_filename
        if not manifest_path.is_file():
            raise NotFoundError(root)

        fingerprints = read_manifest(manifest_path)

        mismatches = []
        for relative_path, recorded_hash in fingerprints.items():
            mismatch = self.check_file(root, relative_path, recorded_hash)
            if mismatch is not None:
                mismatches.append(mismatch)
            if self.on_check is not None:
                self.on_check(
                    relative_path,
                    CheckStatus.MATCH if mismatch is None else mismatch.status,
                )

        logger.debug(
            "Checked %d files under %s, %d mismatches",
            len(fingerprints),
            root,
            len(mismatches),
        )
        return VerificationResult(
            root=str(root),
            checked=len(fingerprints),
            mismatches=tuple(mismatches),
        )


def check(
    source_dir: Path | str,
    config: FingerprintConfig | None = None,
    on_check: CheckCallback | None = None,
) -> VerificationResult:
    """Verify source_dir against its manifest. See Verifier.check."""
    return Verifier(config, on_check=on_check).check(source_dir)
