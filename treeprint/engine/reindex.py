"""
Reindexer: fingerprint every file under a directory tree.

Traversal is depth-first with a fixed order per directory level: entries
sorted by name, regular files first, then subdirectories. The order only
makes manifests reproducible; verification does not depend on it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Iterator

from treeprint.config import FingerprintConfig
from treeprint.core.hasher import hash_file
from treeprint.core.manifest.codec import write_manifest
from treeprint.core.manifest.record import FingerprintRecord, Manifest
from treeprint.errors import ConflictError

logger = logging.getLogger(__name__)

RecordCallback = Callable[[FingerprintRecord], None]


def iter_tree_files(
    root: Path,
    skip_names: frozenset[str] = frozenset(),
) -> Iterator[Path]:
    """
    Yield regular files under root in deterministic order.

    Args:
        root: Directory to walk.
        skip_names: Entry names ignored at every level.

    Yields:
        Absolute file paths.
    """
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)

    files = []
    dirs = []
    for entry in entries:
        if entry.name in skip_names:
            continue
        if entry.is_dir(follow_symlinks=False):
            dirs.append(entry)
        elif entry.is_file():
            files.append(entry)
        elif entry.is_dir():
            logger.debug("Not descending into symlinked directory %s", entry.path)
        else:
            logger.debug("Skipping special file %s", entry.path)

    for entry in files:
        yield Path(entry.path)
    for entry in dirs:
        yield from iter_tree_files(Path(entry.path), skip_names)


class Reindexer:
    """Builds the manifest for a directory tree."""

    def __init__(
        self,
        config: FingerprintConfig | None = None,
        on_record: RecordCallback | None = None,
    ):
        """
        Initialize reindexer.

        Args:
            config: Engine configuration; defaults apply when omitted.
            on_record: Called with each record as soon as it is hashed.
        """
        self.config = config or FingerprintConfig()
        self.on_record = on_record

    def manifest_path(self, root: Path) -> Path:
        return root / self.config.manifest_filename

    def backup_path(self, root: Path) -> Path:
        return root / self.config.backup_filename

    def _check_conflicts(self, root: Path) -> None:
        for path in (self.manifest_path(root), self.backup_path(root)):
            if path.is_dir():
                raise ConflictError(path)

    def fingerprint(self, root: Path) -> Manifest:
        """Hash every file under root without writing anything."""
        records = []
        for path in iter_tree_files(root, self.config.reserved_names):
            record = FingerprintRecord.create(
                hash=hash_file(path, self.config.chunk_size),
                relative_path=path.relative_to(root).as_posix(),
            )
            records.append(record)
            if self.on_record is not None:
                self.on_record(record)
        return Manifest(records=tuple(records))

    def build(self, source_dir: Path | str, dry_run: bool = False) -> Manifest:
        """
        Fingerprint a tree and write its manifest.

        An existing manifest is renamed to the backup name first, replacing
        any older backup. Any file that cannot be hashed aborts the build
        before the manifest or backup is touched.

        Args:
            source_dir: Directory to fingerprint.
            dry_run: If True, hash the tree but leave the filesystem alone.

        Returns:
            The manifest that was (or, on a dry run, would be) written.

        Raises:
            FileNotFoundError: If source_dir does not exist.
            NotADirectoryError: If source_dir is not a directory.
            ConflictError: If the manifest or backup path is a directory.
            OSError: If a file cannot be hashed.
        """
        root = Path(source_dir).resolve()
        if not root.exists():
            raise FileNotFoundError(f"Source directory not found: {root}")
        if not root.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        self._check_conflicts(root)

        manifest = self.fingerprint(root)
        logger.debug("Hashed %d files under %s", len(manifest), root)

        if dry_run:
            return manifest

        manifest_path = self.manifest_path(root)
        backup_path = self.backup_path(root)
        if manifest_path.exists():
            logger.warning(
                "Fingerprints file `%s` exists, creating backup", manifest_path
            )
            if backup_path.exists():
                logger.warning("Overwriting previous backup `%s`", backup_path)

        write_manifest(manifest_path, manifest.records, backup_path=backup_path)
        return manifest


def build(
    source_dir: Path | str,
    config: FingerprintConfig | None = None,
    on_record: RecordCallback | None = None,
    dry_run: bool = False,
) -> Manifest:
    """Fingerprint source_dir and write its manifest. See Reindexer.build."""
    return Reindexer(config, on_record=on_record).build(source_dir, dry_run=dry_run)
