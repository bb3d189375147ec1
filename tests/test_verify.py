"""Tests for verifying trees against their manifests."""

import os
import sys
from pathlib import Path

import pytest

from treeprint.core.hasher import hash_bytes
from treeprint.engine.reindex import build
from treeprint.engine.verify import CheckStatus, Verifier, check
from treeprint.errors import ManifestFormatError, NotFoundError

MANIFEST = ".fingerprints"


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """Fingerprinted tree: x='abc', y='', sub/z='abc'."""
    root = tmp_path / "tree"
    (root / "sub").mkdir(parents=True)
    (root / "x").write_bytes(b"abc")
    (root / "y").write_bytes(b"")
    (root / "sub" / "z").write_bytes(b"abc")
    build(root)
    return root


class TestCheck:
    """Tests for Verifier.check."""

    def test_intact_tree(self, tree: Path) -> None:
        result = check(tree)
        assert result.ok
        assert result.checked == 3
        assert result.as_mapping() == {}

    def test_edited_file_reported(self, tree: Path) -> None:
        """Scenario: editing y reports exactly y with the hash of its new bytes."""
        (tree / "y").write_bytes(b"a")

        result = check(tree)

        assert result.as_mapping() == {"y": hash_bytes(b"a")}
        mismatch = result.mismatches[0]
        assert mismatch.status == CheckStatus.CHANGED
        assert mismatch.recorded_hash == hash_bytes(b"")

    def test_deleted_file_reported(self, tree: Path) -> None:
        (tree / "x").unlink()

        result = check(tree)

        assert not result.ok
        assert result.as_mapping() == {"x": None}
        assert result.mismatches[0].status == CheckStatus.MISSING

    def test_every_mismatch_collected(self, tree: Path) -> None:
        """One bad file does not stop the others from being checked."""
        (tree / "x").unlink()
        (tree / "sub" / "z").write_bytes(b"abd")

        result = check(tree)

        assert set(result.as_mapping()) == {"x", "sub/z"}
        assert result.checked == 3

    def test_replaced_by_directory(self, tree: Path) -> None:
        (tree / "x").unlink()
        (tree / "x").mkdir()
        result = check(tree)
        assert result.mismatches[0].status == CheckStatus.UNREADABLE

    @pytest.mark.skipif(
        sys.platform == "win32" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unreadable_file_reported(self, tree: Path) -> None:
        (tree / "y").chmod(0)
        try:
            result = check(tree)
        finally:
            (tree / "y").chmod(0o644)
        assert result.as_mapping() == {"y": None}
        assert result.mismatches[0].status == CheckStatus.UNREADABLE

    def test_new_files_ignored(self, tree: Path) -> None:
        (tree / "new").write_bytes(b"new")
        assert check(tree).ok

    def test_read_only(self, tree: Path) -> None:
        (tree / "y").write_bytes(b"a")
        before = (tree / MANIFEST).read_bytes()
        check(tree)
        assert (tree / MANIFEST).read_bytes() == before
        assert not (tree / ".fingerprints.bak").exists()

    def test_no_manifest(self, tmp_path: Path) -> None:
        """Scenario: verifying a tree without a manifest fails and writes nothing."""
        (tmp_path / "f").write_bytes(b"data")
        with pytest.raises(NotFoundError):
            check(tmp_path)
        assert [p.name for p in tmp_path.iterdir()] == ["f"]

    def test_manifest_is_directory(self, tmp_path: Path) -> None:
        (tmp_path / MANIFEST).mkdir()
        with pytest.raises(NotFoundError):
            check(tmp_path)

    def test_malformed_manifest(self, tree: Path) -> None:
        with open(tree / MANIFEST, "a") as f:
            f.write("too short\n")
        with pytest.raises(ManifestFormatError):
            check(tree)

    def test_order_independent(self, tree: Path) -> None:
        """Shuffled manifest lines verify the same way."""
        path = tree / MANIFEST
        lines = path.read_text().splitlines()
        path.write_text("\n".join(reversed(lines)) + "\n")
        (tree / "y").write_bytes(b"a")
        assert check(tree).as_mapping() == {"y": hash_bytes(b"a")}

    def test_path_with_spaces(self, tmp_path: Path) -> None:
        (tmp_path / "a dir").mkdir()
        (tmp_path / "a dir" / "my file.txt").write_bytes(b"content")
        build(tmp_path)
        assert check(tmp_path).ok
        (tmp_path / "a dir" / "my file.txt").write_bytes(b"other")
        assert set(check(tmp_path).as_mapping()) == {"a dir/my file.txt"}

    def test_progress_callback(self, tree: Path) -> None:
        (tree / "y").write_bytes(b"a")
        seen = []
        Verifier(on_check=lambda path, status: seen.append((path, status))).check(tree)
        assert seen == [
            ("x", CheckStatus.MATCH),
            ("y", CheckStatus.CHANGED),
            ("sub/z", CheckStatus.MATCH),
        ]

    @pytest.mark.skipif(sys.platform == "win32", reason="name not allowed on Windows")
    def test_carriage_return_in_name(self, tmp_path: Path) -> None:
        (tmp_path / "ok").write_bytes(b"ok")
        (tmp_path / "a\rb").write_bytes(b"content")
        manifest = build(tmp_path)
        assert set(manifest.as_mapping()) == {"ok", "a\rb"}
        assert check(tmp_path).ok
        (tmp_path / "a\rb").write_bytes(b"edited")
        assert check(tmp_path).as_mapping() == {"a\rb": hash_bytes(b"edited")}

    @pytest.mark.skipif(sys.platform == "win32", reason="name not allowed on Windows")
    def test_trailing_space_in_name(self, tmp_path: Path) -> None:
        """Trailing spaces are part of the recorded path."""
        (tmp_path / "x ").write_bytes(b"content")
        manifest = build(tmp_path)
        assert manifest.paths() == ["x "]
        assert check(tmp_path).ok
        (tmp_path / "x ").unlink()
        assert check(tmp_path).as_mapping() == {"x ": None}
