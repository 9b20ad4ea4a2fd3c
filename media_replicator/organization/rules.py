import logging
from collections import defaultdict
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

from .. import config
from ..exceptions import DestinationCollisionError
from ..models import FileRecord


def bucket_for(modified_at: Optional[datetime]) -> Tuple[str, str]:
    """Returns (year, month_name). Missing timestamps map to 1970/January."""
    dt = modified_at or config.DEFAULT_BUCKET_DATETIME
    return f"{dt.year:04d}", config.MONTH_NAMES[dt.month - 1]


def destination_for(record: FileRecord, dest_root: Path) -> Path:
    year, month_name = bucket_for(record.modified_at)
    return dest_root / year / month_name / record.path.name


class DestinationPlanner:
    """
    Assigns destination paths for one replicate run and applies the
    collision policy.

    A collision is two records in the same run resolving to the same path.
    Files left behind by earlier runs are not collisions; they get
    overwritten so repeated runs converge on the same tree.
    """

    def __init__(self, dest_root: Path, on_collision: str = 'overwrite'):
        if on_collision not in config.COLLISION_POLICIES:
            raise ValueError(f"Unknown collision policy: {on_collision}")
        self.dest_root = dest_root
        self.on_collision = on_collision
        # Names already claimed in this run, per folder
        self.used_names = defaultdict(set)

    def plan(self, record: FileRecord) -> Optional[Path]:
        """Returns the destination for record, or None if it should be skipped."""
        target = destination_for(record, self.dest_root)
        folder, name = target.parent, target.name

        if name not in self.used_names[folder]:
            self.used_names[folder].add(name)
            return target

        if self.on_collision == 'overwrite':
            logging.warning(f"{record.path} overwrites an earlier file at {target}")
            return target
        if self.on_collision == 'skip':
            logging.warning(f"Skipping {record.path}: {target} already used in this run")
            return None
        if self.on_collision == 'error':
            raise DestinationCollisionError(f"{record.path} collides with an earlier file at {target}")

        return self._resolve_collision(folder, name)

    def _resolve_collision(self, folder: Path, filename: str) -> Path:
        """Ensures filename is unique in the destination folder."""
        stem = Path(filename).stem
        ext = Path(filename).suffix
        candidate = filename
        counter = 1

        while candidate in self.used_names[folder]:
            candidate = f"{stem}_{counter}{ext}"
            counter += 1

        self.used_names[folder].add(candidate)
        return folder / candidate
