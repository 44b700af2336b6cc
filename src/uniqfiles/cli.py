#!/usr/bin/env python3
"""
uniqfiles CLI — report or omit duplicate file contents, like `uniq` for whole files.
Prints one path per line so the output can be piped into other tools; with --trash
the reported duplicates are moved to the system trash, never erased.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import json
import sys
import os
import time
from typing import Dict, List, Optional, NoReturn
import logging

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import send2trash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("send2trash")

try:
    import xxhash  # noqa: F401
except ImportError:
    _MISSING_DEPS.append("xxhash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from uniqfiles.core.models import (
    ReportRow, ReportDuplicate, UniqFilesParams, UniqFilesError, ValidationError
)
from uniqfiles.commands import UniqFilesCommand
from uniqfiles.utils.convert_utils import ConvertUtils
from uniqfiles.services.file_service import FileService
from uniqfiles.aliases import (
    REPORT_ALIASES, REPORT_ALIAS_HELP, ReportAliasAction,
    REPORT_DUPLICATE_ALIASES, REPORT_DUPLICATE_CHOICES, REPORT_DUPLICATE_HELP_TEXT,
    ALGORITHM_HELP_TEXT, EPILOG_TEXT
)

logger = logging.getLogger(__name__)


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self.command: Optional[UniqFilesCommand] = None

        # UTF-8 for Windows consoles; surrogateescape writes undecodable POSIX file names back as raw bytes
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding="utf-8", errors="surrogateescape")

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="uniqfiles",
            description="uniqfiles — Report or omit duplicate file contents",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "files",
            nargs="+",
            metavar="FILE",
            help="Files (or directories, with --recurse) to check"
        )
        parser.add_argument(
            "--recurse", "-R",
            action="store_true",
            help="Recurse into subdirectories (symlinks are never followed)"
        )

        # Report options
        parser.add_argument(
            "--report-unique",
            action=argparse.BooleanOptionalAction,
            default=True,
            help="Whether to report files whose content is unique. Default: yes"
        )
        parser.add_argument(
            "--report-duplicate",
            choices=REPORT_DUPLICATE_CHOICES,
            default=ReportDuplicate.FIRST_ONLY.value,
            type=str,
            metavar="MODE",
            help=REPORT_DUPLICATE_HELP_TEXT
        )
        for flag in REPORT_ALIASES:
            parser.add_argument(flag, action=ReportAliasAction, help=REPORT_ALIAS_HELP[flag])

        # Annotations
        parser.add_argument(
            "--count", "-c",
            action="store_true",
            help="Show the number of occurrences of each file's content (1 = unique)"
        )
        parser.add_argument(
            "--show-digest",
            action="store_true",
            help="Show the digest of each file (empty for files with a unique size)"
        )
        parser.add_argument(
            "--group-by-digest",
            action="store_true",
            help="Sort files by size and digest, separating each group with a blank line"
        )

        # Digest options
        parser.add_argument(
            "--algorithm",
            default=None,
            type=str,
            metavar="NAME",
            help=ALGORITHM_HELP_TEXT
        )
        parser.add_argument(
            "--algorithm-args", "-A",
            action="append",
            default=[],
            type=str,
            metavar="ARGS",
            dest="algorithm_args",
            help="Comma separated algorithm arguments, e.g. -A blake2b (implies --algorithm hashlib)"
        )
        parser.add_argument(
            "--jobs", "-j",
            default=None,
            type=int,
            metavar="N",
            help="Number of files digested in parallel. Default: CPU count + 4, at most 32"
        )

        # Actions
        parser.add_argument(
            "--trash",
            action="store_true",
            help="Move the reported files to the system trash. Only allowed with -D\n"
                 "(keep one copy of each duplicated content). Shows a preview first."
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --trash (for automation/scripts)"
        )

        # Output options
        parser.add_argument(
            "--json",
            action="store_true",
            help="Print the report as JSON"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Only print errors to stderr"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show debug messages, progress and statistics on stderr"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.trash:
            self.error_exit("--force can only be used with --trash")

        if args.jobs is not None and args.jobs < 1:
            self.error_exit("--jobs must be a positive integer")

        if args.trash:
            mode = REPORT_DUPLICATE_ALIASES[args.report_duplicate]
            if args.report_unique or mode != ReportDuplicate.ALL_BUT_FIRST:
                self.error_exit(
                    "--trash only works with -D (--no-report-unique --report-duplicate=all-but-first), "
                    "so that one copy of every content is kept"
                )
            # Prevent interactive confirmation in non-TTY environments
            if not args.force and (not sys.stdin.isatty() or not sys.stdout.isatty()):
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

    def create_params(self, args: argparse.Namespace) -> UniqFilesParams:
        """Create UniqFilesParams from CLI arguments."""
        try:
            return UniqFilesParams(
                paths=args.files,
                recurse=args.recurse,
                report_unique=args.report_unique,
                report_duplicate=REPORT_DUPLICATE_ALIASES[args.report_duplicate],
                count=args.count,
                show_digest=args.show_digest,
                group_by_digest=args.group_by_digest,
                algorithm=args.algorithm,
                algorithm_args=ConvertUtils.split_comma_list(args.algorithm_args),
                jobs=args.jobs,
            )
        except ValidationError as e:
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

    def run_pipeline(self, params: UniqFilesParams) -> List[ReportRow]:
        """Execute the pipeline, turning fatal errors into an exit."""
        self.command = UniqFilesCommand()
        try:
            rows, stats = self.command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except UniqFilesError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")
            print(stats.print_summary(), file=sys.stderr)
        return rows

    @staticmethod
    def format_rows(rows: List[ReportRow]) -> List[str]:
        """Plain text lines: tab separated columns, blank line between digest groups."""
        lines = []
        for row in rows:
            if row.separator_before:
                lines.append("")
            lines.append("\t".join(row.fields()))
        return lines

    @staticmethod
    def format_json(rows: List[ReportRow], grouped: bool) -> str:
        data = []
        group = 0
        for row in rows:
            if row.separator_before:
                group += 1
            item = row.to_dict()
            if grouped:
                item["group"] = group
            data.append(item)
        return json.dumps(data, indent=2, ensure_ascii=False)

    def output_results(self, rows: List[ReportRow], args: argparse.Namespace) -> None:
        if args.json:
            print(self.format_json(rows, grouped=args.group_by_digest))
            return
        for line in self.format_rows(rows):
            print(line)

    def file_sizes(self) -> Dict[str, int]:
        if not self.command:
            return {}
        return {c.path: c.size for c in self.command.get_classifications()}

    def execute_trash(self, rows: List[ReportRow], force: bool = False) -> None:
        """Move all reported files (every copy but the first) to trash, after a preview."""
        paths = [row.path for row in rows]
        if not paths:
            if not self.quiet:
                print("No duplicate files to move to trash.")
            return

        sizes = self.file_sizes()
        space_saved = sum(sizes.get(p, 0) for p in paths)
        space_saved_str = ConvertUtils.bytes_to_human(space_saved)

        if not self.quiet:
            for path in paths:
                print(f"   [TRASH] {path} [{ConvertUtils.bytes_to_human(sizes.get(path, 0))}]")
            print("=" * 60)
            print(f"Summary: {len(paths)} duplicate files, {space_saved_str} would be freed")
            print()

        if force:
            if not self.quiet:
                print("⚠️  WARNING: --force flag skips confirmation. Proceeding...")
        else:
            # Safety check: confirm we're still in interactive mode
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )
            response = input(f"Are you sure you want to move {len(paths)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Cancelled by user.")
                return

        moved, failed = FileService.move_multiple_to_trash(paths)
        for path, error in failed:
            logger.error(f"Failed to move '{path}' to trash: {error}")

        if failed:
            print(f"\n⚠️  Partial success: {moved}/{len(paths)} files moved to trash.")
            print(f"Failed to move {len(failed)} file(s):")
            print(FileService.format_errors(failed))
        elif not self.quiet:
            print(f"✅ Successfully moved {moved} files to trash.")
            print(f"Total space saved: {space_saved_str}")

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        self.validate_args(args)
        params = self.create_params(args)

        rows = self.run_pipeline(params)

        if args.trash:
            self.execute_trash(rows, force=args.force)
        else:
            self.output_results(rows, args)

        if self.verbose:
            elapsed = time.time() - self.start_time
            print(f"Completed in {elapsed:.2f} seconds", file=sys.stderr)


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
