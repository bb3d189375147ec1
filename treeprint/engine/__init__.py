"""Fingerprinting engine: build manifests and verify trees against them."""

from treeprint.engine.reindex import Reindexer, build, iter_tree_files
from treeprint.engine.verify import (
    CheckStatus,
    Mismatch,
    VerificationResult,
    Verifier,
    check,
)

__all__ = [
    "Reindexer",
    "build",
    "iter_tree_files",
    "CheckStatus",
    "Mismatch",
    "VerificationResult",
    "Verifier",
    "check",
]
