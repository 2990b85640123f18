"""
Unit tests for core/normalizer.py
Verifies that directory arguments become non-overlapping absolute scan roots.
"""
import os
from deduper.core.normalizer import normalize_roots


class TestRootValidation:
    """Test rejection of arguments that cannot be scanned."""

    def test_existing_directory_accepted(self, temp_dir):
        result = normalize_roots([str(temp_dir)])
        assert result.roots == [str(temp_dir)]
        assert result.warnings == []

    def test_relative_path_made_absolute(self, temp_dir, monkeypatch):
        (temp_dir / "rel").mkdir()
        monkeypatch.chdir(temp_dir)
        result = normalize_roots(["rel"])
        assert result.roots == [str(temp_dir / "rel")]
        assert os.path.isabs(result.roots[0])

    def test_missing_directory_ignored(self, temp_dir):
        result = normalize_roots([str(temp_dir / "missing")])
        assert result.roots == []
        assert len(result.warnings) == 1
        assert "doesn't exist" in result.warnings[0]

    def test_file_is_not_a_root(self, temp_dir):
        path = temp_dir / "file.txt"
        path.write_bytes(b"x")
        result = normalize_roots([str(path)])
        assert result.roots == []
        assert len(result.warnings) == 1


class TestRedundantRoots:
    """Test removal of repeated and nested roots."""

    def test_duplicate_ignored(self, temp_dir):
        result = normalize_roots([str(temp_dir), str(temp_dir) + os.sep])
        assert result.roots == [str(temp_dir)]
        assert "already submitted" in result.warnings[0]

    def test_descendant_of_known_root_ignored(self, temp_dir):
        child = temp_dir / "child"
        child.mkdir()
        result = normalize_roots([str(temp_dir), str(child)])
        assert result.roots == [str(temp_dir)]
        assert "is a descendant of" in result.warnings[0]

    def test_ancestor_replaces_known_descendants(self, temp_dir):
        a = temp_dir / "a"
        b = temp_dir / "b"
        a.mkdir()
        b.mkdir()
        result = normalize_roots([str(a), str(b), str(temp_dir)])
        assert result.roots == [str(temp_dir)]
        assert len(result.warnings) == 2

    def test_sibling_with_common_prefix_is_not_nested(self, temp_dir):
        """'/data/a' and '/data/ab' are independent roots."""
        a = temp_dir / "a"
        ab = temp_dir / "ab"
        a.mkdir()
        ab.mkdir()
        result = normalize_roots([str(a), str(ab)])
        assert result.roots == [str(a), str(ab)]
        assert result.warnings == []

    def test_argument_order_preserved(self, temp_dir):
        names = ["zeta", "alpha", "mid"]
        for name in names:
            (temp_dir / name).mkdir()
        result = normalize_roots([str(temp_dir / n) for n in names])
        assert result.roots == [str(temp_dir / n) for n in names]

    def test_empty_input(self):
        result = normalize_roots([])
        assert result.roots == []
        assert result.warnings == []
