import os
import pytest
from datetime import datetime
from pathlib import Path
from typing import Optional

from media_replicator.progress import ProgressObserver


class RecordingObserver(ProgressObserver):
    """Collects every progress callback for assertions."""

    def __init__(self):
        self.directories = []
        self.scan_totals = []
        self.transfers = []
        self.copied = []
        self.completed = []

    def on_directory(self, count, path):
        self.directories.append((count, path))

    def on_scan_complete(self, total_files):
        self.scan_totals.append(total_files)

    def on_transfer(self, total_bytes, rate_mbps):
        self.transfers.append((total_bytes, rate_mbps))

    def on_file_copied(self, count, source, destination):
        self.copied.append((count, source, destination))

    def on_replicate_complete(self, total_files, total_bytes):
        self.completed.append((total_files, total_bytes))


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def make_file():
    """Returns a helper that writes a file (creating parents) and optionally pins its mtime."""
    def _make(path: Path, data: bytes = b"data", mtime: Optional[datetime] = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        if mtime is not None:
            ts = mtime.timestamp()
            os.utime(path, (ts, ts))
        return path
    return _make
