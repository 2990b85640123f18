"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/normalizer.py
Turns raw directory arguments into a list of non-overlapping scan roots.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)


@dataclass
class NormalizedRoots:
    """Accepted roots in argument order, plus one warning per rejected or dropped argument."""
    roots: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def normalize_roots(raw_paths: Iterable[str]) -> NormalizedRoots:
    """
    Normalize directory arguments for a scan.

    Rules, applied per argument in order:
    - Resolve to an absolute path
    - Skip paths that do not exist or are not directories
    - Skip exact repeats of an accepted root
    - Skip paths nested inside an accepted root
    - Drop accepted roots nested inside the new path, then accept it

    Ancestry is checked by path components, so '/data/ab' is not inside '/data/a'.
    """
    result = NormalizedRoots()
    accepted: List[Path] = []

    for raw in raw_paths:
        path = Path(raw).expanduser().resolve()

        if not path.is_dir():
            result.warnings.append(f"Directory {raw} doesn't exist; ignoring")
            continue

        if path in accepted:
            result.warnings.append(f"Directory {raw} already submitted; ignoring duplicate")
            continue

        ancestor = next((known for known in accepted if path.is_relative_to(known)), None)
        if ancestor is not None:
            result.warnings.append(f"Directory {raw} is a descendant of {ancestor}; ignoring")
            continue

        descendants = [known for known in accepted if known.is_relative_to(path)]
        for known in descendants:
            result.warnings.append(f"Directory {known} is a descendant of {raw}; ignoring")
            accepted.remove(known)

        accepted.append(path)

    for warning in result.warnings:
        logger.debug(warning)

    result.roots = [str(p) for p in accepted]
    return result
