"""FileService, BlobDeleter and channel protocols: the storage-service boundary."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from blobfiles.handles import BlobKey, FileHandle


@runtime_checkable
class ReadChannel(Protocol):
    """Open conduit for reading a file's bytes."""

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes; return ``b""`` at end of file."""
        ...

    def is_open(self) -> bool:
        """Return whether the channel can still be used."""
        ...

    def close(self) -> None:
        """Release the channel and any lock it holds."""
        ...


@runtime_checkable
class WriteChannel(Protocol):
    """Open conduit for appending bytes to a file."""

    def write(self, data: bytes) -> int:
        """Append ``data`` and return the number of bytes written."""
        ...

    def is_open(self) -> bool:
        """Return whether the channel can still be used."""
        ...

    def close(self) -> None:
        """Release the channel and any lock it holds; the file stays writable."""
        ...

    def close_finally(self) -> None:
        """Release the channel and finalize the file, assigning its blob key."""
        ...


@runtime_checkable
class FileService(Protocol):
    """Remote file service protocol.

    Implementations own handle allocation, channel opening, lock enforcement
    and durability. Failures are reported with the typed errors of
    ``blobfiles.errors``:

    - opening a channel raises a ``ChannelAcquisitionError`` subclass
    - ``get_blob_key`` raises ``BlobKeyNotFoundError`` for unfinalized files
    - ``get_file_for`` raises ``UnknownBlobKeyError`` for unknown keys
    """

    def create_new_blob_file(self, mime_type: str, name: str | None = None) -> FileHandle:
        """Allocate a new writable file and return its handle."""
        ...

    def open_write_channel(self, file: FileHandle, *, locked: bool) -> WriteChannel:
        """Open a write channel, taking the exclusive lock when ``locked``."""
        ...

    def open_read_channel(self, file: FileHandle, *, locked: bool) -> ReadChannel:
        """Open a read channel, taking the exclusive lock when ``locked``."""
        ...

    def get_blob_key(self, file: FileHandle) -> BlobKey:
        """Return the blob key of a finalized file."""
        ...

    def get_file_for(self, key: BlobKey) -> FileHandle:
        """Return the file a blob key was assigned to."""
        ...


@runtime_checkable
class BlobDeleter(Protocol):
    """Blob store deletion protocol."""

    def delete_by_key(self, key: BlobKey) -> None:
        """Delete the blob for ``key``; raise ``BlobNotFoundError`` when unknown."""
        ...
