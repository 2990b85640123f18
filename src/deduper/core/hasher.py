"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements tiered tail fingerprints using pluggable hash algorithms.

Tier t covers the last B * 2**t bytes of a file (B = base window). Tier 0 is the
cheap "low" fingerprint computed for every file; higher tiers are computed only
on demand, when cheaper signals fail to tell two files apart.

TieredHashCache memoizes sizes and fingerprints per (path, tier). Files are
assumed not to change during a run, so cached values are never invalidated.
"""

import logging
import os
from typing import BinaryIO, Dict, Optional, Tuple

import xxhash

from deduper.core.exceptions import AccessError
from deduper.core.interfaces import FingerprintCache, HashAlgorithm
from deduper.core.models import DetectionConfig

logger = logging.getLogger(__name__)

_MASK_64 = (1 << 64) - 1


def fold_digest(value: int) -> int:
    """Folds a 128-bit digest to 64 bits by XOR-ing its high and low halves."""
    return ((value >> 64) ^ value) & _MASK_64


# Use the same way to implement and use any other hashing algorithm
class XXHash128AlgorithmImpl(HashAlgorithm):
    """Streams data through xxHash3-128 and folds the digest to 64 bits."""

    CHUNK_SIZE = 64 * 1024

    def hash_stream(self, stream: BinaryIO) -> int:
        hasher = xxhash.xxh128()
        while True:
            chunk = stream.read(self.CHUNK_SIZE)
            if not chunk:
                break
            hasher.update(chunk)
        return fold_digest(hasher.intdigest())


class TieredHashCache(FingerprintCache):
    """
    Computes and caches tail fingerprints of files at increasing tiers.
    Owns all of its state, so independent caches can live side by side.
    """

    def __init__(self, config: Optional[DetectionConfig] = None, algorithm: Optional[HashAlgorithm] = None):
        self.config = config or DetectionConfig()
        self.algorithm = algorithm or XXHash128AlgorithmImpl()
        self._sizes: Dict[str, int] = {}
        self._fingerprints: Dict[Tuple[str, int], int] = {}

    def size(self, path: str) -> int:
        """Returns the size of a file in bytes. Raises AccessError if it cannot be stat'ed."""
        size = self._sizes.get(path)
        if size is not None:
            return size
        try:
            size = os.stat(path).st_size
        except OSError as e:
            raise AccessError(path, e.strerror or str(e)) from e
        self._sizes[path] = size
        return size

    def tier_offset(self, tier: int) -> int:
        """Back offset O(t) = B * 2**t: how many tail bytes tier t covers."""
        if tier < 0:
            raise ValueError(f"Tier must be non-negative, got {tier}")
        return self.config.base_window << tier

    def supports_tier(self, path: str, tier: int) -> bool:
        """
        True iff the tier's window stays clear of the file's disallowed header,
        i.e. size * (1 - H) >= O(t).
        """
        return self.size(path) * (1 - self.config.header_ratio) >= self.tier_offset(tier)

    def tail_range(self, path: str, tier: int) -> Tuple[int, int]:
        """Byte range [start, end) hashed for this tier."""
        size = self.size(path)
        return max(0, size - self.tier_offset(tier)), size

    def fingerprint(self, path: str, tier: int) -> int:
        """
        Returns the 64-bit fingerprint of the file's tail for this tier.
        Computed at most once per (path, tier); raises AccessError on I/O failure.
        """
        key = (path, tier)
        cached = self._fingerprints.get(key)
        if cached is not None:
            return cached

        start, end = self.tail_range(path, tier)
        try:
            with open(path, 'rb') as f:
                f.seek(start)
                value = self.algorithm.hash_stream(f)
        except OSError as e:
            raise AccessError(path, e.strerror or str(e)) from e

        self._fingerprints[key] = value
        logger.debug(f"tier {tier} [{start}:{end}] {value:016x} {path}")
        return value

    def low_fingerprint(self, path: str) -> int:
        """Fingerprint over the smallest tail window (tier 0)."""
        return self.fingerprint(path, 0)

    def is_cached(self, path: str, tier: int) -> bool:
        return (path, tier) in self._fingerprints

    def computed_by_tier(self) -> Dict[int, int]:
        """Number of fingerprints computed so far, per tier."""
        counts: Dict[int, int] = {}
        for _, tier in self._fingerprints:
            counts[tier] = counts.get(tier, 0) + 1
        return counts
