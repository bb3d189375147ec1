"""
treeprint: content fingerprints for directory trees.

Builds a flat manifest of SHA-1 digests for every file under a directory
and re-checks the tree against it to detect silent corruption.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
