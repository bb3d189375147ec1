"""Manifest system: fingerprint records, flat-file codec and digests."""

from treeprint.core.manifest.record import FingerprintRecord, Manifest
from treeprint.core.manifest.codec import (
    decode_line,
    decode_manifest,
    encode_manifest,
    encode_record,
    read_manifest,
    write_manifest,
)
from treeprint.core.manifest.digest import (
    ManifestDiff,
    compare_manifests,
    compute_manifest_digest,
)

__all__ = [
    "FingerprintRecord",
    "Manifest",
    "decode_line",
    "decode_manifest",
    "encode_manifest",
    "encode_record",
    "read_manifest",
    "write_manifest",
    "ManifestDiff",
    "compare_manifests",
    "compute_manifest_digest",
]
