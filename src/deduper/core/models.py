"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for tiered duplicate detection: configuration, files, groups,
per-file and per-directory error events, and run statistics.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional

from deduper.core.exceptions import ConfigurationError


# =============================
# Defaults
# =============================

DEFAULT_BASE_WINDOW = 10 * 1024        # Tier 0 hashes this many bytes from the tail
DEFAULT_HEADER_RATIO = 0.1             # Leading fraction of a file no tier > 0 may reach into
DEFAULT_SIZE_RATIO_THRESHOLD = 0.9     # Candidates with min/max size ratio <= this are rejected


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class DetectionConfig:
    """
    Tunable parameters of the tiered hashing scheme.

    base_window: tier 0 back offset B in bytes; tier t covers the last B * 2**t bytes
    header_ratio: disallowed header ratio H in [0, 1)
    size_ratio_threshold: size-ratio rejection threshold R in [0, 1]
    """
    base_window: int = DEFAULT_BASE_WINDOW
    header_ratio: float = DEFAULT_HEADER_RATIO
    size_ratio_threshold: float = DEFAULT_SIZE_RATIO_THRESHOLD

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.base_window, bool) or not isinstance(self.base_window, int):
            raise ConfigurationError(f"Base window must be an integer number of bytes, got {self.base_window!r}")
        if self.base_window <= 0:
            raise ConfigurationError(f"Base window must be positive, got {self.base_window}")
        if not 0 <= self.header_ratio < 1:
            raise ConfigurationError(f"Header ratio must be in [0, 1), got {self.header_ratio}")
        if not 0 <= self.size_ratio_threshold <= 1:
            raise ConfigurationError(f"Size ratio threshold must be in [0, 1], got {self.size_ratio_threshold}")


@dataclass
class File:
    """
    A single file reported in a duplicate group.
    Contents are never held in memory, only the path and its size.
    """
    path: str
    size: int  # in bytes

    def __repr__(self):
        return f"<File path={self.path}, size={self.size}>"


@dataclass
class ProbableDuplicateGroup:
    """
    Files believed to be duplicates, anchored on the canonical member.
    The canonical member (first file placed in the group) is always files[0].
    """
    files: List[File]

    @property
    def canonical(self) -> File:
        return self.files[0]

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.files]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def total_size(self) -> int:
        return sum(f.size for f in self.files)

    def add_file(self, file: File) -> None:
        if any(f.path == file.path for f in self.files):
            raise ValueError(f"File already in group: {file.path}")
        self.files.append(file)

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<ProbableDuplicateGroup canonical={self.canonical.path}, count={len(self.files)}>"


# ======================
#  Events
# ======================

@dataclass(frozen=True)
class AccessFailure:
    """A file that could not be sized, opened or read."""
    path: str
    reason: str


@dataclass(frozen=True)
class ScanError:
    """A directory that could not be listed, or an entry that could not be stat'ed, during traversal."""
    path: str
    reason: str


# ======================
#  Statistics
# ======================

@dataclass
class DetectionStats:
    """
    Statistics collected during a detection run.
    """
    total_time: float = 0.0
    files_scanned: int = 0
    files_ingested: int = 0
    files_skipped: int = 0
    candidates_unreadable: int = 0
    scan_errors: int = 0
    bucket_collisions: int = 0
    buckets: int = 0
    groups_found: int = 0
    fingerprints_by_tier: Dict[int, int] = field(default_factory=dict)

    def print_summary(self) -> str:
        lines = [
            "📊 Detection Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"📁 Files scanned: {self.files_scanned}",
            f"📄 Files ingested: {self.files_ingested}",
            f"⚠️ Files skipped (unreadable): {self.files_skipped}",
            f"🚧 Ingested files unreadable on comparison: {self.candidates_unreadable}",
            f"🔒 Directories not listed: {self.scan_errors}",
            f"🧺 Low-hash buckets: {self.buckets}",
            f"💥 Bucket collisions: {self.bucket_collisions}",
            f"🔍 Probable duplicate groups: {self.groups_found}",
        ]

        if self.fingerprints_by_tier:
            lines.append("Fingerprints per tier:")
            for tier in sorted(self.fingerprints_by_tier):
                lines.append(f"  tier {tier}: {self.fingerprints_by_tier[tier]}")

        return "\n".join(lines)


# ======================
#  Parameters DTO
# ======================

"""
DTO for detection run parameters with built-in validation.
Interface-agnostic — used by the CLI and by library callers.
"""
from deduper.utils.convert_utils import ConvertUtils


@dataclass
class DetectionParams:
    """Parameters for a detection run with validation."""
    root_dirs: List[str]
    config: DetectionConfig = field(default_factory=DetectionConfig)
    min_size_bytes: Optional[int] = None
    max_size_bytes: Optional[int] = None
    extensions: List[str] = field(default_factory=list)
    excluded_dirs: List[str] = field(default_factory=list)
    skip_empty_files: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dirs:
            raise ConfigurationError("At least one root directory is required")

        if self.min_size_bytes is not None and self.min_size_bytes < 0:
            raise ConfigurationError("Minimum size cannot be negative")

        if self.max_size_bytes is not None:
            if self.max_size_bytes < 0:
                raise ConfigurationError("Maximum size cannot be negative")
            if self.min_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
                raise ConfigurationError("Maximum size cannot be less than minimum size")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized

    @staticmethod
    def from_human_readable(
            root_dirs: List[str],
            window_str: str = "10KB",
            header_ratio: float = DEFAULT_HEADER_RATIO,
            size_ratio_threshold: float = DEFAULT_SIZE_RATIO_THRESHOLD,
            min_size_str: Optional[str] = None,
            max_size_str: Optional[str] = None,
            extensions_str: str = "",
            excluded_dirs: Optional[List[str]] = None,
            skip_empty_files: bool = False,
    ) -> 'DetectionParams':
        """
        Factory method to create params from human-readable inputs.
        Size strings such as '10KB' or '1.5M' are converted to bytes.
        Raises ConfigurationError for anything that does not parse or validate.
        """
        try:
            base_window = ConvertUtils.human_to_bytes(window_str)
            min_size = ConvertUtils.human_to_bytes(min_size_str) if min_size_str else None
            max_size = ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        ext_list = [
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ] if extensions_str else []

        return DetectionParams(
            root_dirs=list(root_dirs),
            config=DetectionConfig(
                base_window=base_window,
                header_ratio=header_ratio,
                size_ratio_threshold=size_ratio_threshold,
            ),
            min_size_bytes=min_size,
            max_size_bytes=max_size,
            extensions=ext_list,
            excluded_dirs=excluded_dirs or [],
            skip_empty_files=skip_empty_files,
        )
