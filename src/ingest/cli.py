#!/usr/bin/env python3
"""CLI interface for the zip-drop publisher."""

import argparse
import time
from pathlib import Path

from rich.table import Table

from common.env import env
from common.errors import ConfigError, PublisherError
from common.logger import console, error, get_logger, setup_logging, success
from common.settings import load_settings

from .archive import is_archive
from .manifest import ManifestStore
from .models import ArchiveRecord
from .pipeline import Pipeline
from .watcher import ArchiveWatcher, RunScheduler

logger = get_logger(__name__)


def cmd_watch(args):
    """Watch the posts directory until interrupted.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    settings = load_settings()
    pipeline = Pipeline.from_settings(settings)
    settings.upload_data_dir.mkdir(parents=True, exist_ok=True)

    scheduler = RunScheduler(pipeline.process_latest_archive)
    watcher = ArchiveWatcher(
        settings.posts_dir,
        scheduler,
        debounce_ms=settings.watch_debounce_ms,
        polling=args.polling,
        poll_interval=args.poll_interval,
    )

    logger.info(f"Profile: [bold]{settings.profile}[/bold]")
    watcher.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping watcher")
    finally:
        watcher.stop()

    return 0


def cmd_process(args):
    """Process the newest archive (or a given archive) once."""
    settings = load_settings()
    pipeline = Pipeline.from_settings(settings)

    if args.archive:
        if not args.archive.is_file() or not is_archive(args.archive):
            error(f"{args.archive} is not a zip archive")
            return 1
        record = ArchiveRecord(
            name=args.archive.name,
            path=args.archive,
            modified_time=args.archive.stat().st_mtime,
        )
        outcome = pipeline.process_archive(record)
    else:
        outcome = pipeline.process_latest_archive()

    if outcome.status == "published" and outcome.record:
        success(f"{outcome.record.title} → {outcome.record.remote_url}")
    return 0


def cmd_manifest(args):
    """List archives recorded in the manifest."""
    manifest_path = args.manifest or env.manifest_path()
    records = ManifestStore(manifest_path).records()

    if not records:
        console.print(f"No processed archives in {manifest_path}")
        return 0

    table = Table(title=f"Processed archives ({len(records)})")
    table.add_column("Archive", no_wrap=True)
    table.add_column("Title")
    table.add_column("URL")
    table.add_column("Uploaded")
    table.add_column("Hash")

    for record in sorted(records, key=lambda r: r.uploaded_at):
        table.add_row(
            record.archive_name,
            record.title,
            record.remote_url,
            record.uploaded_at,
            record.hash[:12],
        )

    console.print(table)
    return 0


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Publish zipped markdown articles dropped into a directory"
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO, overridden by LOG_LEVEL)",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    watch_parser = subparsers.add_parser("watch", help="Watch the posts directory and publish")
    watch_parser.add_argument(
        "--polling",
        action="store_true",
        help="Poll the directory instead of using native file system events",
    )
    watch_parser.add_argument(
        "--poll-interval",
        type=float,
        default=1.0,
        help="Seconds between polls when --polling is set (default: 1.0)",
    )
    watch_parser.set_defaults(func=cmd_watch)

    process_parser = subparsers.add_parser("process", help="Process the newest archive once")
    process_parser.add_argument(
        "--archive",
        type=Path,
        default=None,
        help="Process this archive instead of the newest one",
    )
    process_parser.set_defaults(func=cmd_process)

    manifest_parser = subparsers.add_parser("manifest", help="List processed archives")
    manifest_parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Manifest file (default: MANIFEST_PATH or ./processed-posts.json)",
    )
    manifest_parser.set_defaults(func=cmd_manifest)

    args = parser.parse_args()
    setup_logging(level=args.log_level, log_file=args.log_file)

    try:
        return args.func(args)
    except ConfigError as e:
        error(f"Configuration error: {e}")
        return 1
    except PublisherError as e:
        error(str(e))
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    exit(main())
