"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the detection engine.
These protocols enforce structural typing using Python's `typing.Protocol` to ensure
consistency across modules while maintaining flexibility and modularity.

Key Components:
---------------
- HashAlgorithm: Streaming 64-bit fingerprint function over a binary stream.
- FingerprintCache: Sizes files and memoizes tiered tail fingerprints.
- FileScanner: Walks a directory tree, yielding paths or per-directory errors.
- Detector: Ingests paths one at a time and accumulates probable-duplicate groups.
"""

from typing import Protocol, List, BinaryIO, Iterator, Optional, Callable, Union
from deduper.core.models import ProbableDuplicateGroup, ScanError


# ===== Interfaces =====

class HashAlgorithm(Protocol):
    """
    Interface for fingerprint hash functions.

    Allows plugging in a different non-cryptographic hash without
    affecting the tiering or detection logic.
    """

    def hash_stream(self, stream: BinaryIO) -> int:
        """Hashes everything from the stream's current position to EOF into a 64-bit value."""
        ...


class FingerprintCache(Protocol):
    """Interface for sizing files and computing memoized tiered fingerprints."""

    def size(self, path: str) -> int: ...
    def supports_tier(self, path: str, tier: int) -> bool: ...
    def fingerprint(self, path: str, tier: int) -> int: ...
    def low_fingerprint(self, path: str) -> int: ...


class FileScanner(Protocol):
    """
    Interface for walking file systems.

    Methods:
        iter_entries: Lazily yields file paths and directory errors in traversal order.
    """
    def iter_entries(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Iterator[Union[str, ScanError]]:
        """
        Walk the configured root directory.

        Args:
            stopped_flag: Function that returns True if the walk should end.

        Yields:
            An absolute file path, or a ScanError for a directory that could not be listed.
        """
        ...


class Detector(Protocol):
    """
    Interface for the duplicate detection engine.

    Files are ingested one at a time in producer order; each is compared only
    against files ingested before it.
    """
    def ingest(self, path: str) -> bool:
        """Ingest one file. Returns False if the file was unreadable and skipped."""
        ...

    def probable_duplicate_groups(self) -> List[ProbableDuplicateGroup]:
        """Snapshot of every probable-duplicate group found so far."""
        ...
