"""Typed errors for blobfiles."""


class BlobFilesError(Exception):
    """Base exception for all blobfiles errors."""


class ChannelAcquisitionError(BlobFilesError):
    """Raised when a read or write channel cannot be opened for a file."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the file path and a short reason."""
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open channel for {path}: {reason}")


class FileLockedError(ChannelAcquisitionError):
    """Raised when another live channel holds the exclusive lock on a file."""

    def __init__(self, path: str) -> None:
        """Initialize with the locked file's path."""
        super().__init__(path, "file is locked by another channel")


class FileFinalizedError(ChannelAcquisitionError):
    """Raised when a write channel is requested for a finalized file."""

    def __init__(self, path: str) -> None:
        """Initialize with the finalized file's path."""
        super().__init__(path, "file is finalized and no longer writable")


class FileNotFinalizedError(ChannelAcquisitionError):
    """Raised when a read channel is requested for a file that is still writable."""

    def __init__(self, path: str) -> None:
        """Initialize with the unfinalized file's path."""
        super().__init__(path, "file is not finalized yet")


class FileNotFoundInServiceError(ChannelAcquisitionError):
    """Raised when the file service has no file at the requested path."""

    def __init__(self, path: str) -> None:
        """Initialize with the missing file's path."""
        super().__init__(path, "no such file")


class ChannelReleaseError(BlobFilesError):
    """Raised when closing or finalize-closing a channel fails."""


class ChannelClosedError(ChannelReleaseError):
    """Raised for I/O or finalization on a channel that is already closed."""

    def __init__(self, path: str) -> None:
        """Initialize with the path of the closed channel's file."""
        self.path = path
        super().__init__(f"Channel for {path} is closed")


class BlobKeyResolutionError(BlobFilesError):
    """Raised when a file handle and a blob key cannot be mapped onto each other."""


class BlobKeyNotFoundError(BlobKeyResolutionError):
    """Raised when a file has no blob key, typically because it was never finalized."""

    def __init__(self, path: str) -> None:
        """Initialize with the file path that has no blob key."""
        self.path = path
        super().__init__(f"No blob key for file: {path}")


class UnknownBlobKeyError(BlobKeyResolutionError):
    """Raised when a blob key does not belong to any known file."""

    def __init__(self, key: str) -> None:
        """Initialize with the unknown key value."""
        self.key = key
        super().__init__(f"Unknown blob key: {key}")


class BlobNotFoundError(BlobFilesError):
    """Raised when the blob store has no blob for a key."""

    def __init__(self, blob_id: str) -> None:
        """Initialize with the missing blob's ID."""
        self.blob_id = blob_id
        super().__init__(f"Blob not found: {blob_id}")
