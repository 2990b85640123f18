"""
Deduper — probable duplicate file finder based on tiered tail hashing.

Core features:
- Files are bucketed by a cheap xxHash128 fingerprint of their last 10KB
- Colliding files are refined by size ratio, then by fingerprints of growing tail windows
- Windows never reach into a file's leading header region
- Read-only: files are never deleted or modified
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("deduper")
except PackageNotFoundError:
    import tomllib
    from pathlib import Path

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from deduper.commands import DetectionCommand
from deduper.core import (
    DetectionConfig, DetectionParams, DetectionStats, DuplicateDetector, TieredHashCache,
    File, ProbableDuplicateGroup, AccessFailure, ScanError, AccessError, ConfigurationError)
from deduper.utils.convert_utils import ConvertUtils

__all__ = [
    "DetectionCommand",
    "DetectionConfig",
    "DetectionParams",
    "DetectionStats",
    "DuplicateDetector",
    "TieredHashCache",
    "File",
    "ProbableDuplicateGroup",
    "AccessFailure",
    "ScanError",
    "AccessError",
    "ConfigurationError",
    "ConvertUtils",
    "__version__",
]
