"""
Progress reporting hooks for the scan and copy phases.

The scanner and replicator only ever talk to a ProgressObserver passed in by
the caller; nothing here is process-wide state.
"""
from pathlib import Path
from typing import Optional

from tqdm import tqdm


class ProgressObserver:
    """No-op observer. Subclass and override the hooks you care about."""

    def on_directory(self, count: int, path: str):
        """Called once per directory listed during a scan."""

    def on_scan_complete(self, total_files: int):
        pass

    def on_replicate_start(self, total_files: int):
        pass

    def on_transfer(self, total_bytes: int, rate_mbps: float):
        """Called at each throughput checkpoint (>= 1s apart) during copy."""

    def on_file_copied(self, count: int, source: Path, destination: Path):
        """Called after each whole file has been copied (or planned, in a dry run)."""

    def on_replicate_complete(self, total_files: int, total_bytes: int):
        pass

    def close(self):
        """Called once when the run ends, successfully or not."""


class TqdmProgress(ProgressObserver):
    """
    Renders scan and copy progress with tqdm.

    Scan shows a spinner-style counter of visited directories, copy shows a
    files bar with the latest transfer rate as its postfix message.
    """

    def __init__(self, disable: bool = False):
        self.disable = disable
        self._scan_bar: Optional[tqdm] = None
        self._copy_bar: Optional[tqdm] = None

    def on_directory(self, count: int, path: str):
        if self._scan_bar is None:
            self._scan_bar = tqdm(desc="Scanning", unit="dir", disable=self.disable)
        self._scan_bar.update(count - self._scan_bar.n)
        self._scan_bar.set_postfix_str(path, refresh=False)

    def on_scan_complete(self, total_files: int):
        if self._scan_bar is not None:
            self._scan_bar.close()
            self._scan_bar = None

    def on_replicate_start(self, total_files: int):
        self._copy_bar = tqdm(total=total_files, desc="Copying", unit="file", disable=self.disable)

    def on_transfer(self, total_bytes: int, rate_mbps: float):
        if self._copy_bar is not None:
            self._copy_bar.set_postfix_str(f"Transfer rate: {rate_mbps:.2f} Mbps")

    def on_file_copied(self, count: int, source: Path, destination: Path):
        if self._copy_bar is not None:
            self._copy_bar.update(1)

    def on_replicate_complete(self, total_files: int, total_bytes: int):
        if self._copy_bar is not None:
            self._copy_bar.set_postfix_str("Files copied.")
            self._copy_bar.close()
            self._copy_bar = None

    def close(self):
        # Bars left open by an interrupted scan or copy
        for bar in (self._scan_bar, self._copy_bar):
            if bar is not None:
                bar.close()
        self._scan_bar = None
        self._copy_bar = None
