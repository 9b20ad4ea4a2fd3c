import os
import logging
import re
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from .. import config
from ..exceptions import ScanRootError
from ..metadata.extract import MetadataExtractor
from ..models import DirEntryInfo, FileRecord, ScanConfig
from ..progress import ProgressObserver

ListDir = Callable[[str], List[DirEntryInfo]]


# --- Prune predicates (pure, no filesystem access) ---

def is_hidden(name: str) -> bool:
    return name.startswith('.') and name not in ('.', '..')


def is_skipped_dir(path_str: str, skip_substrings: Iterable[str]) -> bool:
    # Plain substring match on the full path: "Android/Data" also matches "MyAndroid/Database".
    return any(skip in path_str for skip in skip_substrings)


def should_prune(entry: DirEntryInfo, skip_substrings: Iterable[str]) -> bool:
    """True if the entry must not be descended into (dirs) or reported (files)."""
    if is_hidden(entry.name):
        return True
    return entry.is_dir and is_skipped_dir(entry.path, skip_substrings)


def build_extension_pattern(extensions: Iterable[str], case_sensitive: bool = True) -> re.Pattern:
    """Compiles '\\.(ext1|ext2|...)' anchored at the very end of the path."""
    alternation = "|".join(re.escape(ext) for ext in extensions)
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(rf"\.({alternation})\Z", flags)


# --- Traversal ---

def scandir_entries(path: str) -> List[DirEntryInfo]:
    """Lists one directory without following symlinks. Raises OSError if unreadable."""
    entries = []
    with os.scandir(path) as it:
        for e in it:
            if e.is_dir(follow_symlinks=False):
                kind = 'dir'
            elif e.is_file(follow_symlinks=False):
                kind = 'file'
            else:
                kind = 'other'
            entries.append(DirEntryInfo(path=e.path, name=e.name, kind=kind))

    # Sort for stable traversal order
    entries.sort(key=lambda e: e.name.lower())
    return entries


def walk(root: str,
         list_dir: ListDir = scandir_entries,
         skip_substrings: Iterable[str] = (),
         on_directory: Optional[Callable[[int, str], None]] = None) -> Iterator[DirEntryInfo]:
    """
    Depth-first walker that prunes hidden and skip-listed entries before
    descending. The root itself is never pruned. Unreadable directories are
    skipped silently.
    """
    skip_substrings = tuple(skip_substrings)
    stack = [root]
    visited = 0
    while stack:
        current = stack.pop()
        try:
            entries = list_dir(current)
        except OSError as e:
            if current == root:
                logging.warning(f"Cannot list source directory {root}: {e}")
            else:
                logging.debug(f"Cannot list {current}: {e}")
            continue

        visited += 1
        if on_directory:
            on_directory(visited, current)

        dirs = []
        for entry in entries:
            if should_prune(entry, skip_substrings):
                continue
            if entry.is_dir:
                dirs.append(entry.path)
            yield entry

        # Push dirs reversed so we process A before Z
        for d in reversed(dirs):
            stack.append(d)


class DiskScanner:
    def __init__(self,
                 observer: Optional[ProgressObserver] = None,
                 metadata: Optional[MetadataExtractor] = None,
                 list_dir: ListDir = scandir_entries):
        self.observer = observer or ProgressObserver()
        self.metadata = metadata or MetadataExtractor()
        self.list_dir = list_dir

    def scan(self, scan_config: ScanConfig) -> List[FileRecord]:
        """
        Walks scan_config.root and returns a FileRecord for every matching file.

        Raises ScanRootError if the root is missing. Everything below the root
        is best-effort: unreadable directories and metadata are skipped or
        recorded as None.
        """
        root = Path(scan_config.root)
        if not root.is_dir():
            raise ScanRootError(f"Source directory not found: {root}")

        pattern = build_extension_pattern(scan_config.extensions, scan_config.case_sensitive)
        logging.info(f"Scanning {root} for {', '.join(scan_config.extensions)}...")

        records = []
        for entry in walk(str(root),
                          list_dir=self.list_dir,
                          skip_substrings=scan_config.skip_substrings,
                          on_directory=self.observer.on_directory):
            if not entry.is_file or not pattern.search(entry.path):
                continue

            path = Path(entry.path)
            modified_at = self.metadata.get_capture_time(path, scan_config.date_source)
            records.append(FileRecord(path=path, modified_at=modified_at))

        self.observer.on_scan_complete(len(records))
        logging.info(f"Scan complete. Found {len(records)} files.")
        return records


def scan(root: Path,
         extensions: Iterable[str] = config.DEFAULT_EXTENSIONS,
         skip_substrings: Iterable[str] = config.DEFAULT_SKIP_SUBSTRINGS,
         observer: Optional[ProgressObserver] = None) -> List[FileRecord]:
    scan_config = ScanConfig(root=Path(root),
                             extensions=tuple(extensions),
                             skip_substrings=frozenset(skip_substrings))
    return DiskScanner(observer=observer).scan(scan_config)
