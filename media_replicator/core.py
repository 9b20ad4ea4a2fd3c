import logging
import threading
from pathlib import Path
from typing import List, Optional

from .models import FileRecord, ReplicationSummary, ScanConfig
from .organization.replicator import Replicator
from .progress import ProgressObserver
from .scanning.filesystem import DiskScanner


class MediaReplicatorApp:
    def __init__(self, observer: Optional[ProgressObserver] = None):
        self.observer = observer or ProgressObserver()

    def discover(self, scan_config: ScanConfig) -> List[FileRecord]:
        scanner = DiskScanner(observer=self.observer)
        return scanner.scan(scan_config)

    def organize(self,
                 scan_config: ScanConfig,
                 dest_root: Path,
                 on_collision: str = 'overwrite',
                 dry_run: bool = False,
                 cancel_event: Optional[threading.Event] = None) -> ReplicationSummary:
        """
        Runs the two phases strictly in sequence:
        1. Scan (fully materialized before any copy starts)
        2. Replicate into dest_root/<YYYY>/<MonthName>/
        """
        # --- Step 1: Scanning ---
        records = self.discover(scan_config)

        if not records:
            logging.info("No matching files found.")

        # --- Step 2: Replication ---
        replicator = Replicator(observer=self.observer,
                                on_collision=on_collision,
                                dry_run=dry_run,
                                cancel_event=cancel_event)
        summary = replicator.replicate(records, dest_root)

        logging.info("Replication phase complete.")
        return summary
