"""
Unified command orchestrator for a detection run.
This is the SINGLE source of truth for the scan → ingest workflow — used by the CLI and library callers.
"""
import logging
import time
from typing import List, Optional, Callable, Tuple
from deduper.core.models import ProbableDuplicateGroup, DetectionStats, DetectionParams, AccessFailure, ScanError
from deduper.core.scanner import FileScannerImpl
from deduper.core.hasher import TieredHashCache
from deduper.core.detector import DuplicateDetector

logger = logging.getLogger(__name__)

SCAN_STAGE = "Scanning and hashing"
GROUP_STAGE = "Grouping"


class DetectionCommand:
    """
    Orchestrates the entire detection workflow:
    1. Build one fingerprint cache and detector for the run
    2. Walk every root directory in order, ingesting each file as it is found
    3. Snapshot the probable-duplicate groups

    Usage:
        params = DetectionParams(root_dirs=[...])
        command = DetectionCommand()
        groups, stats = command.execute(
            params,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    PROGRESS_INTERVAL = 500  # Report progress every N files

    def __init__(self):
        self._detector: Optional[DuplicateDetector] = None
        self._scan_errors: List[ScanError] = []

    def execute(
            self,
            params: DetectionParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None
    ) -> Tuple[List[ProbableDuplicateGroup], DetectionStats]:
        """
        Execute a detection run with given parameters.

        Args:
            params: Validated detection parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if the whole run should stop)

        Returns:
            Tuple of (probable_duplicate_groups, statistics)

        Raises:
            RuntimeError: If a root directory does not exist
        """
        stats = DetectionStats()
        start_time = time.time()

        cache = TieredHashCache(params.config)
        self._detector = DuplicateDetector(cache)
        self._scan_errors = []

        for root_dir in params.root_dirs:
            if stopped_flag and stopped_flag():
                break
            logger.info(f"🔍 Processing directory {root_dir}")
            scanner = FileScannerImpl(
                root_dir=root_dir,
                min_size=params.min_size_bytes,
                max_size=params.max_size_bytes,
                extensions=params.extensions,
                excluded_dirs=params.excluded_dirs,
                skip_empty=params.skip_empty_files
            )
            self._ingest_tree(scanner, stats, progress_callback, stopped_flag)

        if progress_callback:
            progress_callback(SCAN_STAGE, stats.files_scanned, None)

        groups = self._detector.probable_duplicate_groups()
        if progress_callback:
            progress_callback(GROUP_STAGE, len(groups), len(groups))

        stats.files_ingested = self._detector.ingested_count
        stats.files_skipped = len(self._detector.failures)
        stats.candidates_unreadable = len(self._detector.candidate_failures)
        stats.scan_errors = len(self._scan_errors)
        stats.bucket_collisions = self._detector.collision_count
        stats.buckets = self._detector.bucket_count
        stats.groups_found = len(groups)
        stats.fingerprints_by_tier = cache.computed_by_tier()
        stats.total_time = time.time() - start_time

        logger.info(f"✅ Run completed. {stats.files_ingested} files ingested, {len(groups)} probable duplicate groups.")
        return groups, stats

    def _ingest_tree(
            self,
            scanner: FileScannerImpl,
            stats: DetectionStats,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]],
            stopped_flag: Optional[Callable[[], bool]]
    ) -> None:
        progress_counter = 0
        for entry in scanner.iter_entries(stopped_flag=stopped_flag):
            if isinstance(entry, ScanError):
                self._scan_errors.append(entry)
                continue

            if stopped_flag and stopped_flag():
                logger.debug("Run interrupted by user")
                return

            self._detector.ingest(entry)
            stats.files_scanned += 1
            progress_counter += 1

            if progress_callback and progress_counter >= self.PROGRESS_INTERVAL:
                progress_callback(SCAN_STAGE, stats.files_scanned, None)
                progress_counter = 0

    def get_failures(self) -> List[AccessFailure]:
        """Files skipped because they could not be read during the last run."""
        return self._detector.failures if self._detector else []

    def get_candidate_failures(self) -> List[AccessFailure]:
        """Ingested files that could not be read again when later files were compared to them."""
        return self._detector.candidate_failures if self._detector else []

    def get_scan_errors(self) -> List[ScanError]:
        """Directories that could not be listed during the last run."""
        return list(self._scan_errors)
