"""
Manifest digests and comparison.

A digest summarises a whole manifest in one short string so two trees can
be compared at a glance; the comparison lists which paths differ.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import xxhash

from treeprint.core.json_canonical import canonical_json_bytes


def compute_manifest_digest(mapping: Mapping[str, str]) -> str:
    """
    Compute an order-independent digest of a path to hash mapping.

    Two manifests recording the same files with the same content produce
    the same digest, whatever order their records were written in.

    Args:
        mapping: Relative path to content hash.

    Returns:
        Hex-encoded xxh64 digest.
    """
    # Canonical JSON sorts keys, so record order does not leak in
    json_bytes = canonical_json_bytes(dict(mapping))
    return xxhash.xxh64(json_bytes).hexdigest()


@dataclass
class ManifestDiff:
    """Differences between two manifests, paths sorted."""

    added: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return not (self.added or self.removed or self.changed)


def compare_manifests(
    manifest_a: Mapping[str, str],
    manifest_b: Mapping[str, str],
) -> ManifestDiff:
    """
    Compare two manifests by path.

    Args:
        manifest_a: Baseline mapping.
        manifest_b: Mapping compared against the baseline.

    Returns:
        Paths only in b (added), only in a (removed), and in both with
        differing hashes (changed).
    """
    paths_a = set(manifest_a)
    paths_b = set(manifest_b)
    return ManifestDiff(
        added=sorted(paths_b - paths_a),
        removed=sorted(paths_a - paths_b),
        changed=sorted(p for p in paths_a & paths_b if manifest_a[p] != manifest_b[p]),
    )
