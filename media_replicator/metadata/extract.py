import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

import exifread

from .. import config


class MetadataExtractor:
    """
    Best-effort timestamp lookup for scanned files.

    Strategies:
      - mtime: filesystem last-modification time (default).
      - exif:  'exifread' capture date, falling back to mtime.

    Nothing here raises on unreadable files; callers get None instead.
    """

    def get_capture_time(self, path: Path, date_source: str = 'mtime') -> Optional[datetime]:
        if date_source == 'exif':
            dt = self.get_exif_datetime(path)
            if dt:
                return dt
        return self.get_modified_time(path)

    def get_modified_time(self, path: Path) -> Optional[datetime]:
        """Returns the local-time mtime, or None if the file cannot be stat'ed."""
        try:
            return datetime.fromtimestamp(path.stat().st_mtime)
        except (OSError, OverflowError, ValueError) as e:
            logging.debug(f"Could not read metadata for {path}: {e}")
            return None

    def get_exif_datetime(self, path: Path) -> Optional[datetime]:
        try:
            with path.open('rb') as f:
                # details=False speeds up processing significantly
                tags = exifread.process_file(f, details=False)
        except Exception as e:
            logging.debug(f"ExifRead failed for {path}: {e}")
            return None

        return self._parse_exif_date(tags)

    def _parse_exif_date(self, tags) -> Optional[datetime]:
        """Helper to parse standard EXIF date strings from exifread."""
        for tag in config.DATE_TAGS:
            if tag in tags:
                try:
                    # EXIF format is usually "YYYY:MM:DD HH:MM:SS"
                    dt_str = str(tags[tag]).replace(':', '-', 2)
                    return datetime.strptime(dt_str, "%Y-%m-%d %H:%M:%S")
                except ValueError:
                    continue
        return None
