"""
Flat manifest codec.

Each line is ``<40 hex chars> <relative path>``. Lines are split at the
fixed hash width rather than at a delimiter, so paths may contain spaces.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from treeprint.core.hasher import HASH_HEX_WIDTH
from treeprint.core.manifest.record import FingerprintRecord
from treeprint.errors import ManifestFormatError

SEPARATOR = " "
# Undecodable bytes in file names round-trip through the manifest unchanged
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"
TEMP_SUFFIX = ".tmp"


def encode_record(record: FingerprintRecord) -> str:
    """Encode one record as a manifest line without terminator."""
    return f"{record.hash}{SEPARATOR}{record.relative_path}"


def encode_manifest(records: Iterable[FingerprintRecord]) -> str:
    """Encode records as newline-terminated manifest text."""
    return "".join(encode_record(r) + "\n" for r in records)


def decode_line(line: str, line_number: int | None = None) -> FingerprintRecord:
    """
    Parse one manifest line.

    Args:
        line: Line text, with or without its terminator.
        line_number: 1-based line number for error messages.

    Returns:
        The parsed record.

    Raises:
        ManifestFormatError: If the line is too short, the hash is not
            valid hex, or the separator is missing.
    """
    line = line.rstrip("\r\n")
    if len(line) < HASH_HEX_WIDTH + len(SEPARATOR):
        raise ManifestFormatError(
            f"line too short to hold a {HASH_HEX_WIDTH}-character hash and a path",
            line_number,
        )

    hash_hex = line[:HASH_HEX_WIDTH]
    if line[HASH_HEX_WIDTH] != SEPARATOR:
        raise ManifestFormatError(
            f"expected a single space after the hash, got {line[HASH_HEX_WIDTH]!r}",
            line_number,
        )
    relative_path = line[HASH_HEX_WIDTH + len(SEPARATOR):]

    try:
        return FingerprintRecord.create(hash_hex, relative_path)
    except ManifestFormatError as e:
        raise ManifestFormatError(str(e), line_number) from e


def iter_records(text: str) -> Iterable[FingerprintRecord]:
    """Yield records from manifest text, skipping blank lines."""
    for line_number, line in enumerate(text.split("\n"), 1):
        if not line.strip():
            continue
        yield decode_line(line, line_number)


def decode_manifest(text: str) -> dict[str, str]:
    """
    Parse manifest text into a path to hash mapping.

    A path that occurs more than once keeps its last hash.
    """
    return {r.relative_path: r.hash for r in iter_records(text)}


def read_manifest(path: Path | str) -> dict[str, str]:
    """Read and decode a manifest file."""
    with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
        return decode_manifest(f.read())


def temp_path_for(path: Path | str) -> Path:
    """Scratch file a manifest is written to before it replaces the target."""
    path = Path(path)
    return path.with_name(path.name + TEMP_SUFFIX)


def write_manifest(
    path: Path | str,
    records: Iterable[FingerprintRecord],
    backup_path: Path | str | None = None,
) -> None:
    """
    Write records to a manifest file atomically.

    The content goes to a scratch file in the target directory which then
    replaces the target, so readers see either the old or the new manifest.
    The file is created with the process umask, like any other new file.

    Args:
        path: Manifest file path.
        records: Records to write, in order.
        backup_path: If given and a manifest already exists, it is renamed
            here (replacing any older backup) once the new content is on disk.
    """
    path = Path(path)
    tmp_path = temp_path_for(path)
    # Left over from an interrupted write; recreate so the umask applies
    tmp_path.unlink(missing_ok=True)
    try:
        with open(
            tmp_path, "x", encoding=ENCODING, errors=ENCODING_ERRORS, newline="\n"
        ) as f:
            f.write(encode_manifest(records))
        if backup_path is not None and path.exists():
            os.replace(path, backup_path)
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
