"""CLI with subcommands: merge, process, fix-dates."""
from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .core.config import FixDatesConfig, MergeConfig, ProcessConfig, ShareConfig
from .core.protocols import RemoteFileSystem
from .logging.rich_logger import QuietProgressReporter, RichProgressReporter, configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="takeout-reorg",
        description="Reorganize Google Takeout photo exports on an SMB share.",
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ============ MERGE command ============
    merge_parser = subparsers.add_parser(
        "merge",
        help="Consolidate the Google Photos folders of all Takeout folders",
    )
    merge_parser.add_argument(
        "source",
        help="Share path holding the Takeout* folders",
    )
    merge_parser.add_argument(
        "--target",
        default=None,
        help="Consolidated share path (default: SOURCE/merged)",
    )
    merge_parser.add_argument(
        "--prefix",
        default="Takeout",
        help="Folder name prefix to consolidate (default: Takeout)",
    )
    merge_parser.add_argument(
        "--photos-folder",
        default="Google Photos",
        help="Subfolder of each Takeout folder to consolidate (default: Google Photos)",
    )
    merge_parser.add_argument(
        "--rename",
        action="store_true",
        help="Rename from sidecar metadata while consolidating instead of moving",
    )
    merge_parser.add_argument(
        "--staging-dir",
        type=Path,
        default=None,
        help="Local folder for downloads when --rename is used",
    )
    merge_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without changing anything",
    )
    _add_remote_arguments(merge_parser)

    # ============ PROCESS command ============
    process_parser = subparsers.add_parser(
        "process",
        help="Rename and re-date media from their JSON sidecars into a new tree",
    )
    process_parser.add_argument(
        "source",
        help="Share path to read media from",
    )
    process_parser.add_argument(
        "target",
        help="Share path to write renamed media to",
    )
    process_parser.add_argument(
        "--staging-dir",
        type=Path,
        default=None,
        help="Local folder for downloads (default: system temp)",
    )
    process_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without uploading",
    )
    _add_remote_arguments(process_parser)

    # ============ FIX-DATES command ============
    fix_parser = subparsers.add_parser(
        "fix-dates",
        help="Set file modification dates from EXIF DateTimeOriginal",
    )
    fix_parser.add_argument(
        "year",
        nargs="?",
        default=None,
        help="Fallback year (YYYY) for files without DateTimeOriginal",
    )
    fix_parser.add_argument(
        "--root",
        type=Path,
        default=Path("."),
        help="Directory to walk (default: current directory)",
    )

    return parser


def _add_remote_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("share")
    group.add_argument(
        "--server",
        default=None,
        help="SMB server address (credentials from SMB_USERNAME/SMB_PASSWORD)",
    )
    group.add_argument(
        "--share",
        default=None,
        help="SMB share name",
    )
    group.add_argument(
        "--domain",
        default="WORKGROUP",
        help="SMB workgroup or domain (default: WORKGROUP)",
    )
    group.add_argument(
        "--local",
        type=Path,
        default=None,
        help="Use a locally mounted share root instead of smbclient",
    )


def build_filesystem(args: argparse.Namespace) -> RemoteFileSystem:
    """Remote filesystem selected by --local or --server/--share."""
    from .remote import LocalFileSystem, SmbClientFileSystem

    if args.local is not None:
        return LocalFileSystem(args.local)
    if not args.server or not args.share:
        raise ValueError("Either --local or both --server and --share are required")
    return SmbClientFileSystem(ShareConfig.from_env(args.server, args.share, args.domain))


def _location(args: argparse.Namespace) -> str:
    if args.local is not None:
        return str(args.local)
    return f"//{args.server}/{args.share}"


# ============ Command Handlers ============

def cmd_merge(args: argparse.Namespace, reporter) -> int:
    """Handle the merge command."""
    from .engines.exiftool import ExifTool
    from .services.driver import BatchDriver
    from .services.mover import CollisionSafeMover
    from .services.renamer import MetadataRenamer

    config = MergeConfig(
        source_root=args.source,
        target_root=args.target,
        folder_prefix=args.prefix,
        photos_folder=args.photos_folder,
        dry_run=args.dry_run,
    )
    fs = build_filesystem(args)

    reporter.print_header("takeout-reorg merge")
    if config.dry_run:
        reporter.warning("Running in DRY RUN mode. No files will be changed.")
    reporter.print_config({
        "Share": _location(args),
        "Source": config.source_root,
        "Target": config.target_root,
        "Folder Prefix": config.folder_prefix,
        "Photos Folder": config.photos_folder,
        "Mode": "rename" if args.rename else "move",
        "Dry Run": config.dry_run,
    })

    if not args.rename:
        handler = CollisionSafeMover(fs, reporter, dry_run=config.dry_run)
        stats = BatchDriver(fs, handler, reporter, config).run()
    else:
        process_config = ProcessConfig(
            source_root=config.source_root,
            target_root=config.target_root,
            dry_run=config.dry_run,
            staging_dir=args.staging_dir,
        )
        with ExifTool() as exiftool:
            handler = MetadataRenamer(fs, exiftool, reporter, process_config)
            stats = BatchDriver(fs, handler, reporter, config).run()

    reporter.print_stats(stats)
    reporter.success("Reorganization process completed.")
    return 0


def cmd_process(args: argparse.Namespace, reporter) -> int:
    """Handle the process command."""
    import time

    from .core.models import ProcessingStats
    from .engines.exiftool import ExifTool
    from .services.renamer import MetadataRenamer

    config = ProcessConfig(
        source_root=args.source,
        target_root=args.target,
        dry_run=args.dry_run,
        staging_dir=args.staging_dir,
    )
    fs = build_filesystem(args)

    reporter.print_header("takeout-reorg process")
    if config.dry_run:
        reporter.warning("Running in DRY RUN mode. No files will be changed.")
    reporter.print_config({
        "Share": _location(args),
        "Source": config.source_root,
        "Target": config.target_root,
        "Dry Run": config.dry_run,
    })

    stats = ProcessingStats()
    started = time.monotonic()
    with ExifTool() as exiftool:
        MetadataRenamer(fs, exiftool, reporter, config).run(
            config.source_root, config.target_root, stats,
        )
    stats.elapsed_seconds = time.monotonic() - started

    reporter.print_stats(stats)
    reporter.success("Processing completed.")
    return 0


def cmd_fix_dates(args: argparse.Namespace, reporter) -> int:
    """Handle the fix-dates command."""
    from .engines.exiftool import ExifTool, is_available
    from .services.date_fixer import DateFixer

    if not is_available():
        reporter.error("exiftool is not installed. Please install it to continue.")
        reporter.info("On macOS: brew install exiftool; on Debian/Ubuntu: apt install libimage-exiftool-perl")
        return 1

    if args.year is None or not re.fullmatch(r"\d{4}", args.year):
        reporter.error("Invalid or missing year. Please provide a 4-digit year.")
        reporter.info("Usage: takeout-reorg fix-dates <year>")
        return 1

    config = FixDatesConfig(year=args.year, root=args.root)
    reporter.print_header("takeout-reorg fix-dates")
    reporter.print_config({
        "Root": str(config.root),
        "Fallback Date": config.fallback_date,
        "Extensions": ", ".join(config.extensions),
    })

    with ExifTool() as exiftool:
        stats = DateFixer(exiftool, reporter, config).run()

    reporter.print_stats(stats, title="Dates Fixed")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Create reporter
    if getattr(args, "quiet", False):
        reporter = QuietProgressReporter()
    else:
        reporter = RichProgressReporter(verbose=getattr(args, "verbose", False))
    if getattr(args, "verbose", False):
        configure_logging(verbose=True)

    # No command specified - show help
    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handler
    try:
        if args.command == "merge":
            return cmd_merge(args, reporter)
        elif args.command == "process":
            return cmd_process(args, reporter)
        elif args.command == "fix-dates":
            return cmd_fix_dates(args, reporter)
        else:
            reporter.error(f"Unknown command: {args.command}")
            return 1

    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return 130
    except ValidationError as e:
        reporter.error(f"Invalid configuration: {e}")
        return 1
    except Exception as e:
        reporter.error(f"An error occurred: {e}")
        if getattr(args, "verbose", False):
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
