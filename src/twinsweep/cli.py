#!/usr/bin/env python3
"""
TwinSweep CLI — console driver for the duplicate detection engine.
Scans the given directories, prints duplicate groups with their categories and
optionally keeps one file per group, deleting the rest.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from typing import List, NoReturn, Optional

from twinsweep.aliases import (
    ALGORITHM_CHOICES, ALGORITHM_HELP_TEXT, EPILOG_TEXT, RULE_HELP_TEXT, RULE_KIND_ALIASES)
from twinsweep.core.engine import DeduplicationEngine
from twinsweep.core.errors import InvalidRuleError, RootTraversalError
from twinsweep.core.models import DuplicateGroup, Rule, RuleKind, ScanParams
from twinsweep.services.activity import LoggingActivityRecorder
from twinsweep.utils.convert_utils import ConvertUtils

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


def parse_rule(spec: str) -> Rule:
    """
    Parses KIND:PATTERN:CATEGORY. The pattern may itself contain ':'
    since the kind ends at the first colon and the category starts after the last.
    """
    if spec.count(":") < 2:
        raise InvalidRuleError(f"Rule must look like KIND:PATTERN:CATEGORY, got '{spec}'")
    kind_str, rest = spec.split(":", 1)
    pattern, category = rest.rsplit(":", 1)

    kind = RULE_KIND_ALIASES.get(kind_str.strip().lower())
    if kind is None:
        kind = RuleKind.parse(kind_str)
    return Rule(kind=kind, pattern=pattern, category=category.strip())


def pick_file_to_keep(group: DuplicateGroup) -> str:
    """The file closest to the root wins; ties go to the shorter, then alphabetically first, path."""
    return min(group.paths, key=lambda p: (p.count(os.sep), len(p), p))


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="twinsweep",
            description="TwinSweep — duplicate file finder with rule-based classification",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            required=True,
            nargs="+",
            type=str,
            help="Directories (space separated) to scan for duplicates"
        )

        # Filtering options
        parser.add_argument(
            "--max-size", "-M",
            default="100MB",
            type=str,
            metavar='',
            help="Skip files larger than this (e.g., 10MB, 1GB). Default: 100MB"
        )
        parser.add_argument(
            "--min-size", "-m",
            default="0",
            type=str,
            metavar='',
            help="Skip files smaller than this (e.g., 1KB). Default: 0"
        )

        # Classification & hashing
        parser.add_argument(
            "--rule", "-r",
            action="append",
            default=[],
            type=str,
            metavar='',
            dest="rules",
            help=RULE_HELP_TEXT
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default="md5",
            type=str,
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--workers", "-w",
            default=None,
            type=int,
            metavar='',
            help="Number of hashing threads. Default: number of CPUs"
        )

        # Actions
        parser.add_argument(
            "--keep-one",
            action="store_true",
            help="Keep one file per duplicate group and delete the rest. "
                 "Always shows preview before deletion for safety."
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            help="Move deleted files to the system trash instead of removing them"
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --keep-one (for automation/scripts)"
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
            help="Show activity log, statistics and progress"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.keep_one:
            self.error_exit("--force can only be used with --keep-one")

        if args.keep_one and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        if args.workers is not None and args.workers < 1:
            self.error_exit("--workers must be at least 1")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            rules = [parse_rule(spec) for spec in args.rules]
            return ScanParams.from_human_readable(
                roots=[os.path.abspath(os.path.expanduser(d)) for d in args.input],
                max_size_str=args.max_size,
                min_size_str=args.min_size,
                algorithm=args.algorithm,
                workers=args.workers,
                rules=rules,
                use_trash=args.trash,
            )
        except InvalidRuleError as e:
            self.error_exit(f"Invalid rule: {e}")
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def run_scan(self, engine: DeduplicationEngine) -> List[DuplicateGroup]:
        """Execute the scan, exiting with a readable message on failure."""
        try:
            groups = engine.scan(progress_callback=self.progress_callback if self.verbose else None)
        except RootTraversalError as e:
            self.error_exit(f"Scan failed: {e}")

        if self.verbose:
            sys.stderr.write("\n")
            print(engine.last_stats.print_summary())
        return groups

    def output_results(self, groups: List[DuplicateGroup]) -> None:
        """Output duplicate groups as plain text, sorted by path inside each group."""
        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        total_files = sum(g.duplicate_count for g in groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files)")

        for idx, group in enumerate(sorted(groups, key=lambda g: min(g.paths)), 1):
            print(f"\n📁 Group {idx} | Files: {group.duplicate_count} | Fingerprint: {group.fingerprint}")
            for member in sorted(group.members, key=lambda m: m.path):
                print(f"   {member.path} [{member.category}]")

    def execute_keep_one(self, engine: DeduplicationEngine, groups: List[DuplicateGroup], force: bool = False) -> None:
        """Keep one file per group, delete the rest. Always shows preview before deletion."""
        if not groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return

        files_to_delete = []
        space_saved = 0
        print()
        for idx, group in enumerate(groups, 1):
            keep = pick_file_to_keep(group)
            print(f"📁 Group {idx} | Files: {group.duplicate_count}")
            print("-" * 60)
            print(f"   [KEEP] {keep}")
            for member in group.members:
                if member.path == keep:
                    continue
                print(f"   [DEL]  {member.path} [{member.category}]")
                files_to_delete.append(member.path)
                try:
                    space_saved += os.path.getsize(member.path)
                except OSError as e:
                    self.warning(f"Cannot read size of {member.path}: {e}")
            print()

        space_saved_str = ConvertUtils.bytes_to_human(space_saved)
        action = "move to trash" if engine.params.use_trash else "permanently delete"

        print("=" * 60)
        print(f"Summary: Keep 1 file per group ({len(groups)} files preserved, {len(files_to_delete)} files deleted)")
        print(f"Total space saved: {space_saved_str}")
        print()

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )

            response = input(f"Are you sure you want to {action} {len(files_to_delete)} files? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return

        result = engine.delete_paths(files_to_delete)

        if result.failed:
            print(f"\n⚠️  Partial success: {len(result.deleted)}/{len(files_to_delete)} files deleted.")
            print(f"Failed to delete {len(result.failed)} file(s):")
            failed = sorted(result.failed)
            for path in failed[:5]:
                print(f"  • {path}")
            if len(failed) > 5:
                print(f"  ...and {len(failed) - 5} more files")
        else:
            print(f"✅ Successfully deleted {len(result.deleted)} files.")
            print(f"Total space saved: {space_saved_str}")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def configure_logging(self) -> None:
        level = logging.INFO if self.verbose else logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        self.validate_args(args)
        params = self.create_params(args)

        engine = DeduplicationEngine(params, recorder=LoggingActivityRecorder())

        if not self.quiet:
            print(f"Scanning directories: {', '.join(params.roots)}")

        groups = self.run_scan(engine)

        if args.keep_one:
            self.execute_keep_one(engine, groups, force=args.force)
        else:
            self.output_results(groups)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {ConvertUtils.seconds_to_human(elapsed)}")


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
