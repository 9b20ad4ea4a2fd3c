"""
Custom exception hierarchy for the media replicator.

Scanning recovers from per-file problems locally, so most of these are
raised by the copy phase, which stops at the first failure.
"""


class MediaReplicatorError(Exception):
    """Base exception for all media replicator errors."""
    pass


class ScanRootError(MediaReplicatorError):
    """Raised when the scan root does not exist or is not a directory."""
    pass


class FileOperationError(MediaReplicatorError):
    """Raised when a directory create, open, read or write fails during copy."""
    pass


class DestinationCollisionError(MediaReplicatorError):
    """Raised when two records resolve to the same destination under the 'error' policy."""
    pass


class ReplicationCancelled(MediaReplicatorError):
    """Raised when a cancellation request is observed between chunks or files."""
    pass
