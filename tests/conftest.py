"""
Shared fixtures for detection engine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Callable, Dict
import sys

# Add src/ to sys.path so the 'deduper' package is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from deduper.core.detector import DuplicateDetector
from deduper.core.hasher import TieredHashCache


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for detection scenarios:
    - 3 identical 1KB files (one of them in a subdirectory)
    - 2 identical 2KB files
    - 2 unique files (different content)
    - 1 empty file (scanned, but has no duplicate)
    - 1 file with .tmp extension (unique content)
    """
    files = {}

    # Duplicate set #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file (0 bytes, no other empty file to pair with)
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Different extension
    files["filtered"] = temp_dir / "ignore.tmp"
    files["filtered"].write_bytes(b"E" * 1024)

    # Subdirectory with duplicates
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)  # Same as dup1_a/b

    return files


@pytest.fixture
def write_file(tmp_path) -> Callable[[str, bytes], str]:
    """Writes bytes to tmp_path/name and returns the absolute path as a string."""
    def _write(name: str, content: bytes) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return str(path)
    return _write


@pytest.fixture
def pattern() -> Callable[[int, int], bytes]:
    """Deterministic non-uniform content of the requested length."""
    def _pattern(length: int, seed: int = 0) -> bytes:
        block = bytes((i * 31 + seed) % 256 for i in range(251))
        return (block * (length // len(block) + 1))[:length]
    return _pattern


@pytest.fixture
def detector() -> DuplicateDetector:
    """Detector with default configuration and its own cache."""
    return DuplicateDetector(TieredHashCache())
