"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements directory traversal feeding the detector.
Features:
- Uses pathlib.Path for robust, cross-platform path handling
- Recursively scans directories in a deterministic (sorted) order
- Applies size, extension, excluded-directory and optional empty-file filters
- Yields paths lazily, interleaved with ScanError events for
  directories that could not be listed
"""

import os
from typing import Iterator, List, Optional, Callable, Union
from pathlib import Path
import time
import logging

logger = logging.getLogger(__name__)

# Local imports
from deduper.core.models import ScanError
from deduper.core.interfaces import FileScanner


class FileScannerImpl(FileScanner):
    """
    Scans a directory tree and filters files based on size and extensions.
    Symbolic links are skipped; zero-byte files only when skip_empty is set.

    Attributes:
        root_dir: Root directory to scan
        min_size: Minimum file size in bytes (optional)
        max_size: Maximum file size in bytes (optional)
        extensions: List of allowed file extensions (e.g., [".txt", ".jpg"])
        excluded_dirs: Directories whose subtrees are never entered
        skip_empty: Drop zero-byte files instead of yielding them
    """

    def __init__(
        self,
        root_dir: str,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        extensions: Optional[List[str]] = None,
        excluded_dirs: Optional[List[str]] = None,
        skip_empty: bool = False
    ):
        self.root_dir = root_dir
        self.min_size = min_size
        self.max_size = max_size
        self.extensions = [ext.lower() for ext in extensions] if extensions else []
        self.excluded_dirs = [Path(d).resolve() for d in excluded_dirs] if excluded_dirs else []
        self.skip_empty = skip_empty

    def iter_entries(self,
                     stopped_flag: Optional[Callable[[], bool]] = None) -> Iterator[Union[str, ScanError]]:
        """
        Lazily walks the tree, yielding absolute file paths and ScanError events.
        Per-directory failures never end the walk.
        """
        root_path = Path(self.root_dir).resolve()
        logger.debug(f"Root directory: {root_path}")
        logger.debug(f"Filters: min_size={self.min_size}, max_size={self.max_size}, extensions={self.extensions}")

        # Validate root directory exists
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        walk_errors: List[OSError] = []
        start_time = time.time()
        yielded = 0

        for root, dirs, files in os.walk(str(root_path), onerror=walk_errors.append):
            yield from self._drain(walk_errors)

            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                return

            # Pre-filter subdirectories BEFORE os.walk enters them, sorted for a stable order
            dirs[:] = sorted(d for d in dirs if self._prefilter_dirs(Path(root) / d))

            for filename in sorted(files):
                path = Path(root) / filename
                try:
                    accepted = self._process_file(path)
                except OSError as e:
                    logger.warning(f"⚠️ Could not stat {path}: {e}")
                    yield ScanError(path=str(path), reason=e.strerror or str(e))
                    continue
                if accepted:
                    yielded += 1
                    yield str(path)

        yield from self._drain(walk_errors)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Found {yielded} matching files.")

    def scan(self, stopped_flag: Optional[Callable[[], bool]] = None) -> List[str]:
        """Eager variant of iter_entries: returns matching paths, logging and dropping errors."""
        return [entry for entry in self.iter_entries(stopped_flag) if isinstance(entry, str)]

    @staticmethod
    def _drain(walk_errors: List[OSError]) -> Iterator[ScanError]:
        while walk_errors:
            error = walk_errors.pop(0)
            logger.warning(f"🔒 Cannot list directory {error.filename}: {error.strerror or error}")
            yield ScanError(path=str(error.filename), reason=error.strerror or str(error))

    def _prefilter_dirs(self, path: Path) -> bool:
        """Pre-filter directories: skip excluded subtrees and directory symlinks."""
        try:
            is_link = path.is_symlink()
        except OSError as e:
            logger.debug(f"Could not check symlink status for {path}: {e}")
            is_link = False
        if is_link:
            logger.debug(f"Skipping symbolic link: {path}")
            return False

        if self.excluded_dirs and self._is_excluded_directory(path):
            logger.debug(f"Skipping excluded directory: {path}")
            return False

        return True

    def _is_excluded_directory(self, path: Path) -> bool:
        """Check if path is within an excluded directory."""
        resolved = path.resolve(strict=False)
        return any(resolved == excluded or resolved.is_relative_to(excluded) for excluded in self.excluded_dirs)

    def _process_file(self, path: Path) -> bool:
        """
        Decide whether an individual file is handed to the detector.
        Raises OSError if the file cannot be stat'ed.
        """
        if path.is_symlink():
            logger.debug(f"Skipping symbolic link: {path}")
            return False

        stat_result = path.stat()
        if not path.is_file():
            logger.debug(f"Skipping non-regular file: {path}")
            return False

        size = stat_result.st_size

        # Skip zero-byte files only when asked to
        if size == 0 and self.skip_empty:
            logger.debug(f"Skipping zero-byte file: {path}")
            return False

        # Apply size filter
        if not self._size_passes(size):
            logger.debug(f"Skipping {path} (size {size} bytes outside range)")
            return False

        # Apply extension filter
        if not self._extension_passes(path):
            logger.debug(f"Skipping {path} (extension not allowed)")
            return False

        logger.debug(f"Accepted file: {path.name} ({size} bytes)")
        return True

    def _size_passes(self, size: int) -> bool:
        """
        Check if file size is within configured limits.
        Args:
            size: File size in bytes
        Returns:
            True if file meets size criteria
        """
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True

    def _extension_passes(self, path: Path) -> bool:
        """
        Check if file matches any of the allowed extensions.
        Args:
            path: Path object pointing to the file
        Returns:
            True if file has one of the allowed extensions
        """
        if not self.extensions:
            return True
        return path.suffix.lower() in self.extensions
