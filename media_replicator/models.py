from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple

from . import config


@dataclass(frozen=True)
class FileRecord:
    """
    Represents a file found during a scan.
    """
    path: Path
    # Best known modification/capture time, naive local. None if metadata was unreadable.
    modified_at: Optional[datetime] = None


@dataclass(frozen=True)
class ScanConfig:
    root: Path
    extensions: Tuple[str, ...] = config.DEFAULT_EXTENSIONS
    skip_substrings: FrozenSet[str] = frozenset(config.DEFAULT_SKIP_SUBSTRINGS)
    case_sensitive: bool = True
    date_source: str = 'mtime'

    def __post_init__(self):
        if not self.extensions:
            raise ValueError("At least one extension is required.")
        if self.date_source not in config.DATE_SOURCES:
            raise ValueError(f"Unknown date source: {self.date_source}")


@dataclass(frozen=True)
class DirEntryInfo:
    """A single directory entry as seen by the walker."""
    path: str
    name: str
    kind: str               # dir/file/other (symlinks are always 'other')

    @property
    def is_dir(self) -> bool:
        return self.kind == 'dir'

    @property
    def is_file(self) -> bool:
        return self.kind == 'file'


@dataclass
class TransferState:
    """Running byte counters for one replicate() call."""
    total_bytes: int = 0
    checkpoint_time: float = 0.0
    checkpoint_bytes: int = 0


@dataclass
class ReplicationSummary:
    files_copied: int = 0
    files_skipped: int = 0
    bytes_copied: int = 0
    destinations: List[Path] = field(default_factory=list)
