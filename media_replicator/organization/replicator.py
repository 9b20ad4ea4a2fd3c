import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from .. import config
from ..exceptions import FileOperationError, ReplicationCancelled
from ..models import FileRecord, ReplicationSummary, TransferState
from ..progress import ProgressObserver
from .rules import DestinationPlanner


class Replicator:
    """
    Copies scanned files into <dest>/<YYYY>/<MonthName>/<name>.

    Copying is fail-fast: the first open/read/write/mkdir error aborts the
    run as FileOperationError. A partially written destination file is
    left in place.
    """

    def __init__(self,
                 observer: Optional[ProgressObserver] = None,
                 chunk_size: int = config.COPY_CHUNK_SIZE,
                 checkpoint_interval: float = config.CHECKPOINT_INTERVAL,
                 clock: Callable[[], float] = time.monotonic,
                 on_collision: str = 'overwrite',
                 dry_run: bool = False,
                 cancel_event: Optional[threading.Event] = None):
        self.observer = observer or ProgressObserver()
        self.chunk_size = chunk_size
        self.checkpoint_interval = checkpoint_interval
        self.clock = clock
        self.on_collision = on_collision
        self.dry_run = dry_run
        self.cancel_event = cancel_event

    def replicate(self, records: Sequence[FileRecord], destination_root: Path) -> ReplicationSummary:
        destination_root = Path(destination_root)
        planner = DestinationPlanner(destination_root, self.on_collision)
        summary = ReplicationSummary()
        state = TransferState(checkpoint_time=self.clock())

        logging.info(f"Processing {len(records)} files -> {destination_root} (DryRun={self.dry_run})...")
        if not self.dry_run:
            self._make_dirs(destination_root)

        self.observer.on_replicate_start(len(records))
        for record in records:
            self._check_cancelled()

            dest = planner.plan(record)
            if dest is None:
                summary.files_skipped += 1
                continue

            if self.dry_run:
                logging.info(f"[DRY RUN] Copy {record.path} -> {dest}")
            else:
                self._make_dirs(dest.parent)
                self._copy_file(record.path, dest, state)
                logging.debug(f"Copied {record.path} -> {dest}")

            summary.files_copied += 1
            summary.destinations.append(dest)
            self.observer.on_file_copied(summary.files_copied, record.path, dest)

        summary.bytes_copied = state.total_bytes
        self.observer.on_replicate_complete(summary.files_copied, summary.bytes_copied)
        logging.info(f"Copied {summary.files_copied} files ({summary.bytes_copied} bytes), skipped {summary.files_skipped}.")
        return summary

    def _copy_file(self, source: Path, dest: Path, state: TransferState):
        try:
            with open(source, 'rb') as src, open(dest, 'wb') as dst:
                while chunk := src.read(self.chunk_size):
                    dst.write(chunk)
                    state.total_bytes += len(chunk)
                    self._checkpoint(state)
                    self._check_cancelled()
        except OSError as e:
            raise FileOperationError(f"Failed to copy {source} -> {dest}: {e}") from e

    def _checkpoint(self, state: TransferState):
        """Reports throughput in Mbps once at least checkpoint_interval has elapsed."""
        now = self.clock()
        elapsed = now - state.checkpoint_time
        if elapsed < self.checkpoint_interval or elapsed <= 0:
            return

        bytes_since_last = state.total_bytes - state.checkpoint_bytes
        rate_mbps = (bytes_since_last * 8) / (1024 * 1024 * elapsed)
        state.checkpoint_bytes = state.total_bytes
        state.checkpoint_time = now
        self.observer.on_transfer(state.total_bytes, rate_mbps)

    def _make_dirs(self, path: Path):
        # exist_ok tolerates another process creating the same folder first
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(f"Failed to create directory {path}: {e}") from e

    def _check_cancelled(self):
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ReplicationCancelled("Replication cancelled.")


def replicate(records: Sequence[FileRecord],
              destination_root: Path,
              observer: Optional[ProgressObserver] = None) -> ReplicationSummary:
    return Replicator(observer=observer).replicate(records, destination_root)
