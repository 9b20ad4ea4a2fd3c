import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional

from . import config
from .core import MediaReplicatorApp
from .exceptions import MediaReplicatorError
from .models import ScanConfig
from .progress import TqdmProgress


def setup_logging(verbose: bool, log_file: Optional[Path] = None):
    """Sets up logging to the console and, optionally, a file."""
    log_level = logging.DEBUG if verbose else logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)


def parse_args(argv: Optional[List[str]] = None):
    p = argparse.ArgumentParser(description="Media Replicator: copy media into YYYY/MonthName folders")

    p.add_argument("-s", "--source-dir", "--sourceDir", dest="source_dir", type=Path, required=True,
                   metavar="DIR", help="Dir to check for images")
    p.add_argument("-t", "--target-dir", "--targetDir", dest="target_dir", type=Path, default=None,
                   metavar="DIR", help="Destination root (required unless --list)")

    p.add_argument("--ext", action="append", default=None, metavar="EXT",
                   help=f"Extension to match, repeatable (default: {' '.join(config.DEFAULT_EXTENSIONS)})")
    p.add_argument("--ignore-case", action="store_true", help="Match extensions case-insensitively")
    p.add_argument("--skip", action="append", default=[], metavar="SUBSTR",
                   help="Prune directories whose path contains SUBSTR, repeatable")
    p.add_argument("--no-default-skips", action="store_true", help="Do not apply the built-in skip list")
    p.add_argument("--skip-dirs-file", type=Path, default=None, help="File containing substrings to skip, one per line")

    p.add_argument("--date-source", choices=config.DATE_SOURCES, default="mtime",
                   help="Where the bucketing date comes from (exif falls back to mtime)")
    p.add_argument("--on-collision", choices=config.COLLISION_POLICIES, default="overwrite",
                   help="What to do when two files map to the same destination")
    p.add_argument("--dry-run", action="store_true", help="Simulate actions without modifying disk")
    p.add_argument("--list", action="store_true", help="Only print the discovered files")
    p.add_argument("--no-progress", action="store_true", help="Disable progress bars")
    p.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = p.parse_args(argv)
    if args.target_dir is None and not args.list:
        p.error("--target-dir is required unless --list is given")
    return args


def normalize_extensions(exts: Iterable[str]) -> tuple:
    cleaned = []
    for ext in exts:
        ext = ext.strip().lstrip('.')
        if ext and ext not in cleaned:
            cleaned.append(ext)
    return tuple(cleaned)


def load_skip_substrings(skip_file: Optional[Path]) -> set[str]:
    if not skip_file or not skip_file.exists():
        return set()

    skips = set()
    with skip_file.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                skips.add(line)
    return skips


def build_scan_config(args) -> ScanConfig:
    skips = set() if args.no_default_skips else set(config.DEFAULT_SKIP_SUBSTRINGS)
    skips.update(args.skip)
    skips.update(load_skip_substrings(args.skip_dirs_file))

    return ScanConfig(
        root=args.source_dir.resolve(),
        extensions=normalize_extensions(args.ext or config.DEFAULT_EXTENSIONS),
        skip_substrings=frozenset(skips),
        case_sensitive=not args.ignore_case,
        date_source=args.date_source,
    )


def format_record(record) -> str:
    if record.modified_at:
        return f"{record.path} (created on {record.modified_at:%Y-%m-%d %H:%M:%S})"
    return f"{record.path} (creation date not available)"


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        scan_config = build_scan_config(args)
    except ValueError as e:
        logging.error(str(e))
        return 2

    logging.info("=== Media Replicator Started ===")
    logging.info(f"Source: {scan_config.root}")

    progress = TqdmProgress(disable=args.no_progress)
    app = MediaReplicatorApp(observer=progress)

    try:
        if args.list:
            for record in app.discover(scan_config):
                print(format_record(record))
            return 0

        dest_root = args.target_dir.resolve()
        logging.info(f"Dest:   {dest_root}")
        app.organize(
            scan_config=scan_config,
            dest_root=dest_root,
            on_collision=args.on_collision,
            dry_run=args.dry_run,
        )
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        return 130
    except MediaReplicatorError as e:
        logging.error(f"Fatal error: {e}")
        return 1
    finally:
        progress.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
