#!/usr/bin/env python3
"""
Deduper CLI — Command line interface for probable duplicate file detection.
Scans one or more directory trees and prints groups of files that are probably
byte-identical. Read-only: files are never deleted or modified.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

from deduper.core.exceptions import ConfigurationError
from deduper.core.models import (
    DEFAULT_HEADER_RATIO, DEFAULT_SIZE_RATIO_THRESHOLD, DetectionParams, ProbableDuplicateGroup
)
from deduper.core.normalizer import normalize_roots
from deduper.commands import DetectionCommand
from deduper.utils.convert_utils import ConvertUtils
from deduper.aliases import (
    WINDOW_HELP_TEXT, HEADER_RATIO_HELP_TEXT, SIZE_RATIO_HELP_TEXT, EPILOG_TEXT
)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.command = DetectionCommand()

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="deduper",
            description="Deduper — finds probable duplicate files by tiered tail hashing",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Required arguments
        parser.add_argument(
            "directories",
            nargs="+",
            type=str,
            metavar="DIR",
            help="Directories to scan for duplicates"
        )

        # Tuning options
        parser.add_argument(
            "--window", "-w",
            default="10KB",
            type=str,
            metavar='',
            help=WINDOW_HELP_TEXT
        )
        parser.add_argument(
            "--header-ratio",
            default=str(DEFAULT_HEADER_RATIO),
            type=str,
            metavar='',
            dest="header_ratio",
            help=HEADER_RATIO_HELP_TEXT
        )
        parser.add_argument(
            "--size-ratio",
            default=str(DEFAULT_SIZE_RATIO_THRESHOLD),
            type=str,
            metavar='',
            dest="size_ratio",
            help=SIZE_RATIO_HELP_TEXT
        )

        # Filtering options
        parser.add_argument(
            "--min-size", "-m",
            default=None,
            type=str,
            metavar='',
            help="Minimum file size (e.g., 500KB, 1MB). Default: no limit"
        )
        parser.add_argument(
            "--max-size", "-M",
            default=None,
            type=str,
            metavar='',
            help="Maximum file size (e.g., 10MB, 1GB). Default: no limit"
        )
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=[],
            type=str,
            metavar='',
            help="File extensions (space separated) to include (e.g., .jpg .png)"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=[],
            type=str,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )
        parser.add_argument(
            "--skip-empty",
            action="store_true",
            dest="skip_empty",
            help="Ignore zero-byte files (by default all empty files form one group)"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        return parser.parse_args(args)

    def create_params(self, args: argparse.Namespace, root_dirs: List[str]) -> DetectionParams:
        """Create DetectionParams from CLI arguments. Exits on invalid tunables."""
        try:
            return DetectionParams.from_human_readable(
                root_dirs=root_dirs,
                window_str=args.window,
                header_ratio=ConvertUtils.human_to_ratio(args.header_ratio),
                size_ratio_threshold=ConvertUtils.human_to_ratio(args.size_ratio),
                min_size_str=args.min_size,
                max_size_str=args.max_size,
                extensions_str=",".join(args.extensions),
                excluded_dirs=[os.path.abspath(d.strip()) for d in args.excluded_dirs],
                skip_empty_files=args.skip_empty,
            )
        except (ConfigurationError, ValueError) as e:
            self.error_exit(f"Parameter error: {e}")

    def resolve_roots(self, directories: List[str]) -> List[str]:
        """Normalize directory arguments, warning about every one that is ignored."""
        normalized = normalize_roots(directories)
        for message in normalized.warnings:
            self.warning(message)
        if not normalized.roots:
            self.error_exit("No valid directories to scan")
        return normalized.roots

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(
                f"\r  [{stage}] {current}/{total} ({percent:.1f}%)"
            )
            sys.stderr.flush()
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
            sys.stderr.flush()

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (placeholder for signal handling)."""
        return False

    def run_detection(self, params: DetectionParams) -> List[ProbableDuplicateGroup]:
        """Execute the detection workflow."""
        if not self.quiet:
            for root_dir in params.root_dirs:
                print(f"Scanning directory: {root_dir}")

        try:
            groups, stats = self.command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except RuntimeError as e:
            self.error_exit(f"Detection failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print("\nDetection Statistics:")
            print(stats.print_summary())

        return groups

    def output_results(self, groups: List[ProbableDuplicateGroup]) -> None:
        """Output probable duplicate groups as plain text, canonical member first."""
        if self.quiet:
            return

        if not groups:
            print("No probable duplicate groups found.")
            return

        total_files = sum(len(g.files) for g in groups)
        print(f"\nFound {len(groups)} probable duplicate groups ({total_files} files)")

        for idx, group in enumerate(groups, 1):
            print(f"\n📁 Group {idx} | Files: {len(group.files)}")
            for position, file in enumerate(group.files):
                marker = " (canonical)" if position == 0 else ""
                print(f"   {file.path} [{ConvertUtils.bytes_to_human(file.size)}]{marker}")

    def output_failures(self) -> None:
        """Summarize files and directories that could not be read. The run still succeeds."""
        failures = self.command.get_failures()
        scan_errors = self.command.get_scan_errors()
        candidate_failures = self.command.get_candidate_failures()

        if failures or scan_errors:
            self.warning(f"{len(failures)} file(s) and {len(scan_errors)} director(ies) or entr(ies) could not be read")
            if self.verbose:
                for failure in failures:
                    self.warning(f"  {failure.path}: {failure.reason}")
                for error in scan_errors:
                    self.warning(f"  {error.path}: {error.reason}")

        # Ingested before they failed, so they keep any group they already joined
        if candidate_failures:
            self.warning(f"{len(candidate_failures)} already ingested file(s) became unreadable and were left out of later comparisons")
            if self.verbose:
                for failure in candidate_failures:
                    self.warning(f"  {failure.path}: {failure.reason}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if self.verbose:
            logging.getLogger("deduper").setLevel(logging.INFO)

        # Tunables are validated before any directory is touched
        params = self.create_params(args, root_dirs=list(args.directories))
        params.root_dirs = self.resolve_roots(args.directories)

        groups = self.run_detection(params)
        self.output_results(groups)
        self.output_failures()

        # Show completion time
        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
