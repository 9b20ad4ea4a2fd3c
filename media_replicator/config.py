"""
Configuration constants for the media replicator.
"""
from datetime import datetime

# --- File Selection ---
# Extensions are matched without the leading dot, case-sensitive by default.
DEFAULT_EXTENSIONS = ('png', 'jpeg', 'jpg', 'gif')

# Any directory whose full path contains one of these is pruned.
DEFAULT_SKIP_SUBSTRINGS = (
    'Android/Data',
    '.thumbnails',
    'WhatsApp/.Shared',
    'WhatsApp/Media/.Statuses',
    'WhatsApp/.Thumbs',
)

# --- Metadata Parsing ---
DATE_SOURCES = ('mtime', 'exif')

DATE_TAGS = [
    'EXIF DateTimeOriginal',
    'EXIF DateTimeDigitized',
    'Image DateTime',
]

# --- Organization ---
# Fixed English names so bucketing does not depend on the process locale.
MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

# Records without a readable timestamp land in 1970/January.
DEFAULT_BUCKET_DATETIME = datetime(1970, 1, 1)

COLLISION_POLICIES = ('overwrite', 'rename', 'skip', 'error')

# --- Copying & Progress ---
COPY_CHUNK_SIZE = 8192  # bytes per read/write
CHECKPOINT_INTERVAL = 1.0  # seconds between throughput reports
