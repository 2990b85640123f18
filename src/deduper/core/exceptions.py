"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Exceptions raised by the duplicate-detection engine.

Kept separate so the CLI and command layers can catch engine failures
without importing the hashing machinery.
"""


class DeduperError(Exception):
    """Base for all deduper errors."""


class AccessError(DeduperError):
    """
    Raised when a single file cannot be sized, opened or read.
    Scope is one file: callers skip it and continue the run.
    """

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot access {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigurationError(DeduperError, ValueError):
    """Raised when tunable parameters are invalid. Fails the run before any ingestion."""
