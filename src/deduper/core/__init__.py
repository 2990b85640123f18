"""
Core detection engine — tiered hasher, detector, scanner and root normalizer.

This package contains the performance-critical foundation of deduper:
- TieredHashCache + XXHash128AlgorithmImpl: memoized tail fingerprints at growing tiers
- DuplicateDetector: low-hash bucketing with size/tier refinement into probable-duplicate groups
- FileScannerImpl: recursive directory traversal yielding paths and per-directory errors
- normalize_roots: de-duplication of nested or repeated root directories
- Models: DetectionConfig, File, ProbableDuplicateGroup, events and statistics

All components are pure Python — suitable for CLI and library usage.
"""

from .exceptions import DeduperError, AccessError, ConfigurationError
from .models import (
    DetectionConfig, DetectionParams, DetectionStats, File, ProbableDuplicateGroup,
    AccessFailure, ScanError)
from .hasher import TieredHashCache, XXHash128AlgorithmImpl, fold_digest
from .detector import DuplicateDetector
from .scanner import FileScannerImpl
from .normalizer import normalize_roots, NormalizedRoots

__all__ = [
    "DeduperError",
    "AccessError",
    "ConfigurationError",
    "DetectionConfig",
    "DetectionParams",
    "DetectionStats",
    "File",
    "ProbableDuplicateGroup",
    "AccessFailure",
    "ScanError",
    "TieredHashCache",
    "XXHash128AlgorithmImpl",
    "fold_digest",
    "DuplicateDetector",
    "FileScannerImpl",
    "normalize_roots",
    "NormalizedRoots",
]
