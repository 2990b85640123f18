"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

detector.py
Implements incremental probable-duplicate detection over a stream of file paths.

Every file is bucketed by its low (tier 0) tail fingerprint. When a file lands
in a bucket that already has members, it is refined against them:

    1. size filter   : drop members whose min/max size ratio is <= R
    2. tier filter   : tier 1, 2, ... drop members whose tier fingerprint differs,
                       for as long as the incoming file supports the tier
    3. grouping      : the first surviving member (arrival order) is canonical;
                       the incoming file joins the canonical member's group

The incoming file is always appended to its bucket afterwards, so later files
can compare against it.

Known approximation: survivors other than the canonical member are not linked
to the incoming file, and groups are never merged. Exact duplicates match at
every tier and always find each other; only inexact probable duplicates can be
split across groups.
"""

import logging
from typing import Callable, Dict, List, Optional

from deduper.core.exceptions import AccessError, ConfigurationError
from deduper.core.hasher import TieredHashCache
from deduper.core.interfaces import Detector
from deduper.core.models import AccessFailure, DetectionConfig, File, ProbableDuplicateGroup

logger = logging.getLogger(__name__)


class DuplicateDetector(Detector):
    """
    Single-threaded detector: ingest() calls must not overlap.
    Arrival order decides which member becomes canonical.
    """

    def __init__(
        self,
        cache: Optional[TieredHashCache] = None,
        config: Optional[DetectionConfig] = None,
        on_access_failure: Optional[Callable[[AccessFailure], None]] = None
    ):
        if cache is None:
            cache = TieredHashCache(config)
        elif config is not None and config != cache.config:
            raise ConfigurationError(
                f"Detector config {config} does not match the fingerprint cache config {cache.config}")
        self.cache = cache
        # B, H and R always come from the same config
        self.config = cache.config
        self.on_access_failure = on_access_failure

        self._buckets: Dict[int, List[str]] = {}
        # Groups keyed by canonical path; dict order is group creation order
        self._groups: Dict[str, List[str]] = {}
        self._failures: List[AccessFailure] = []
        self._failed_paths = set()
        # Already-ingested members that became unreadable while being compared
        self._candidate_failures: List[AccessFailure] = []
        self._failed_candidates = set()
        self._seen_paths = set()
        self.ingested_count = 0
        self.collision_count = 0

    # =============================
    # Ingestion
    # =============================
    def ingest(self, path: str) -> bool:
        """
        Bucket one file, refining it against earlier bucket members on collision.
        Returns False if the file could not be read; it is then reported and left
        out of every bucket and group.
        """
        if path in self._seen_paths:
            logger.debug(f"already ingested, ignoring: {path}")
            return True

        try:
            low_hash = self.cache.low_fingerprint(path)
            bucket = self._buckets.get(low_hash)
            if bucket:
                logger.debug(f"low hash collision {low_hash:016x}: {path} vs {len(bucket)} file(s)")
                self.refine(path, bucket)
                self.collision_count += 1
        except AccessError as e:
            self._report_failure(e)
            return False

        self._buckets.setdefault(low_hash, []).append(path)
        self._seen_paths.add(path)
        self.ingested_count += 1
        return True

    def refine(self, path: str, members: List[str]) -> List[str]:
        """
        Narrows members down to the probable duplicates of path and records
        path in the group of the first survivor.

        Raises AccessError only for failures on path itself, before any group
        is touched. Unreadable members are recorded in candidate_failures and
        dropped from this comparison; they keep their bucket and group places.
        Returns the surviving members in arrival order.
        """
        candidates = self._filter_by_size(path, members)
        candidates = self._filter_by_tiers(path, candidates)

        if candidates:
            # Surviving candidates may not all match each other; only
            # file-to-canonical is recorded.
            self._add_as_probable_duplicate(path, candidates[0])
        return candidates

    # =============================
    # Refinement steps
    # =============================
    def _filter_by_size(self, path: str, members: List[str]) -> List[str]:
        """Drops members of obviously different size. Never hashes."""
        my_size = self.cache.size(path)
        threshold = self.config.size_ratio_threshold
        kept = []
        for member in members:
            if self._size_ratio(my_size, self.cache.size(member)) > threshold:
                kept.append(member)
        return kept

    @staticmethod
    def _size_ratio(a: int, b: int) -> float:
        """min/max of two sizes; two empty files are a perfect match."""
        largest = max(a, b)
        if largest == 0:
            return 1.0
        return min(a, b) / largest

    def _filter_by_tiers(self, path: str, candidates: List[str]) -> List[str]:
        """Drops similar-sized candidates whose tail fingerprints differ at a tier both files support."""
        tier = 1
        while candidates and self.cache.supports_tier(path, tier):
            my_hash = self.cache.fingerprint(path, tier)
            kept = []
            for candidate in candidates:
                if not self.cache.supports_tier(candidate, tier):
                    # the last checked tier is a good proxy for the whole file
                    kept.append(candidate)
                    continue
                try:
                    candidate_hash = self.cache.fingerprint(candidate, tier)
                except AccessError as e:
                    self._report_candidate_failure(e)
                    continue
                if candidate_hash == my_hash:
                    kept.append(candidate)
            logger.debug(f"tier {tier}: {len(kept)}/{len(candidates)} candidate(s) left for {path}")
            candidates = kept
            tier += 1
        return candidates

    def _add_as_probable_duplicate(self, file_to_add: str, canonical: str) -> None:
        group = self._groups.get(canonical)
        if group is None:
            group = [canonical]
            self._groups[canonical] = group
        group.append(file_to_add)
        logger.debug(f"probable duplicate: {file_to_add} ~ {canonical}")

    def _report_failure(self, error: AccessError) -> None:
        if error.path in self._failed_paths:
            return
        self._failed_paths.add(error.path)
        failure = AccessFailure(path=error.path, reason=error.reason)
        self._failures.append(failure)
        logger.warning(f"⚠️ Skipping unreadable file {error.path}: {error.reason}")
        if self.on_access_failure:
            self.on_access_failure(failure)

    def _report_candidate_failure(self, error: AccessError) -> None:
        """
        A member that was readable when ingested could not be read for a
        higher tier. It stays ingested; only this comparison loses it.
        """
        if error.path in self._failed_candidates:
            return
        self._failed_candidates.add(error.path)
        self._candidate_failures.append(AccessFailure(path=error.path, reason=error.reason))
        logger.warning(f"⚠️ Could not compare already ingested file {error.path}: {error.reason}")

    # =============================
    # Results
    # =============================
    def probable_duplicate_groups(self) -> List[ProbableDuplicateGroup]:
        """Point-in-time copy of every group, canonical member first."""
        groups = []
        for canonical, paths in self._groups.items():
            group = ProbableDuplicateGroup(files=[File(path=canonical, size=self.cache.size(canonical))])
            for path in paths[1:]:
                group.add_file(File(path=path, size=self.cache.size(path)))
            groups.append(group)
        return groups

    def absolute_duplicate_groups(self) -> List[ProbableDuplicateGroup]:
        """Reserved: requires full-content comparison, which is not implemented."""
        raise NotImplementedError("Absolute duplicate detection requires full-content comparison")

    @property
    def failures(self) -> List[AccessFailure]:
        """Files skipped because they could not be ingested."""
        return list(self._failures)

    @property
    def candidate_failures(self) -> List[AccessFailure]:
        """Ingested files that could not be read again during a later comparison."""
        return list(self._candidate_failures)

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)
