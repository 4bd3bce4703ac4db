"""InMemoryFileService: dict-based file service for development and testing."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, field

from blobfiles.errors import (
    BlobKeyNotFoundError,
    BlobNotFoundError,
    ChannelClosedError,
    ChannelReleaseError,
    FileFinalizedError,
    FileLockedError,
    FileNotFinalizedError,
    FileNotFoundInServiceError,
    UnknownBlobKeyError,
)
from blobfiles.handles import BlobKey, FileHandle

BLOBSTORE_PREFIX = "/blobstore/writable:"


@dataclass(slots=True)
class _FileRecord:
    """Mutable service-side state of one file."""

    mime_type: str
    name: str | None
    data: bytearray = field(default_factory=bytearray)
    blob_key: str | None = None
    lock_owner: object | None = None


class _MemoryWriteChannel:
    """Write channel appending to an in-memory file record."""

    def __init__(self, service: InMemoryFileService, path: str) -> None:
        self._service = service
        self._path = path
        self._open = True

    def write(self, data: bytes) -> int:
        if not self._open:
            raise ChannelClosedError(self._path)
        return self._service._append(self._path, data)

    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self._service._release(self._path, self)

    def close_finally(self) -> None:
        if not self._open:
            raise ChannelClosedError(self._path)
        self._open = False
        self._service._release(self._path, self, finalize=True)


class _MemoryReadChannel:
    """Read channel over a finalized in-memory file."""

    def __init__(self, service: InMemoryFileService, path: str, data: bytes) -> None:
        self._service = service
        self._path = path
        self._data = data
        self._position = 0
        self._open = True

    def read(self, size: int = -1) -> bytes:
        if not self._open:
            raise ChannelClosedError(self._path)
        end = len(self._data) if size < 0 else min(len(self._data), self._position + size)
        chunk = self._data[self._position : end]
        self._position = end
        return chunk

    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        if not self._open:
            return
        self._open = False
        self._service._release(self._path, self)


class InMemoryFileService:
    """In-memory file service and blob store for development and testing.

    Follow the semantics of a blobstore-backed file service: writes append,
    only finalized files can be read, finalized files cannot be written, and
    locked channels fail fast when another live channel holds the file lock.
    """

    def __init__(self) -> None:
        """Initialize an empty service."""
        self._files: dict[str, _FileRecord] = {}
        self._keys: dict[str, str] = {}
        self._mutex = threading.Lock()

    def create_new_blob_file(self, mime_type: str, name: str | None = None) -> FileHandle:
        """Allocate a new writable blobstore file."""
        path = f"{BLOBSTORE_PREFIX}{uuid.uuid4().hex}"
        with self._mutex:
            self._files[path] = _FileRecord(mime_type=mime_type, name=name)
        return FileHandle(path)

    def open_write_channel(self, file: FileHandle, *, locked: bool) -> _MemoryWriteChannel:
        """Open an append channel on a writable file."""
        with self._mutex:
            record = self._acquire(file.path)
            if record.blob_key is not None:
                raise FileFinalizedError(file.path)
            channel = _MemoryWriteChannel(self, file.path)
            if locked:
                record.lock_owner = channel
        return channel

    def open_read_channel(self, file: FileHandle, *, locked: bool) -> _MemoryReadChannel:
        """Open a read channel on a finalized file."""
        with self._mutex:
            record = self._acquire(file.path)
            if record.blob_key is None:
                raise FileNotFinalizedError(file.path)
            channel = _MemoryReadChannel(self, file.path, bytes(record.data))
            if locked:
                record.lock_owner = channel
        return channel

    def get_blob_key(self, file: FileHandle) -> BlobKey:
        """Return the blob key of a finalized file."""
        with self._mutex:
            record = self._files.get(file.path)
            if record is None or record.blob_key is None:
                raise BlobKeyNotFoundError(file.path)
            return BlobKey(record.blob_key)

    def get_file_for(self, key: BlobKey) -> FileHandle:
        """Return the file a blob key was assigned to."""
        with self._mutex:
            path = self._keys.get(key.value)
        if path is None:
            raise UnknownBlobKeyError(key.value)
        return FileHandle(path)

    def delete_by_key(self, key: BlobKey) -> None:
        """Delete a finalized file and its blob by key."""
        with self._mutex:
            path = self._keys.pop(key.value, None)
            if path is None:
                raise BlobNotFoundError(key.value)
            self._files.pop(path, None)

    def has_file(self, file: FileHandle) -> bool:
        """Check whether the service holds a file at this handle's path."""
        with self._mutex:
            return file.path in self._files

    def _acquire(self, path: str) -> _FileRecord:
        """Look up a record and check its lock; caller holds the mutex."""
        record = self._files.get(path)
        if record is None:
            raise FileNotFoundInServiceError(path)
        if record.lock_owner is not None:
            raise FileLockedError(path)
        return record

    def _append(self, path: str, data: bytes) -> int:
        with self._mutex:
            record = self._files.get(path)
            if record is None:
                raise FileNotFoundInServiceError(path)
            record.data.extend(data)
        return len(data)

    def _release(self, path: str, channel: object, *, finalize: bool = False) -> None:
        """Drop the lock held by ``channel`` and optionally finalize the file."""
        with self._mutex:
            record = self._files.get(path)
            if record is None:
                if finalize:
                    msg = f"Cannot finalize {path}: file no longer exists."
                    raise ChannelReleaseError(msg)
                return
            if record.lock_owner is channel:
                record.lock_owner = None
            if finalize and record.blob_key is None:
                record.blob_key = uuid.uuid4().hex
                self._keys[record.blob_key] = path
