"""LocalFileService: directory-based file service."""

import json
import threading
import uuid
from pathlib import Path
from typing import BinaryIO

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
from blobfiles.service._memory import BLOBSTORE_PREFIX

_DATA_SUFFIX = ".data"
_META_SUFFIX = ".meta.json"


class _LocalWriteChannel:
    """Write channel appending to a data file on disk."""

    def __init__(self, service: "LocalFileService", file_id: str, stream: BinaryIO) -> None:
        self._service = service
        self._file_id = file_id
        self._stream = stream

    @property
    def _path(self) -> str:
        return f"{BLOBSTORE_PREFIX}{self._file_id}"

    def write(self, data: bytes) -> int:
        if self._stream.closed:
            raise ChannelClosedError(self._path)
        return self._stream.write(data)

    def is_open(self) -> bool:
        return not self._stream.closed

    def close(self) -> None:
        if self._stream.closed:
            return
        try:
            self._stream.close()
        finally:
            self._service._release(self._file_id, self)

    def close_finally(self) -> None:
        if self._stream.closed:
            raise ChannelClosedError(self._path)
        try:
            self._stream.close()
        finally:
            self._service._release(self._file_id, self, finalize=True)


class _LocalReadChannel:
    """Read channel over a finalized data file on disk."""

    def __init__(self, service: "LocalFileService", file_id: str, stream: BinaryIO) -> None:
        self._service = service
        self._file_id = file_id
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        if self._stream.closed:
            raise ChannelClosedError(f"{BLOBSTORE_PREFIX}{self._file_id}")
        return self._stream.read(size)

    def is_open(self) -> bool:
        return not self._stream.closed

    def close(self) -> None:
        if self._stream.closed:
            return
        try:
            self._stream.close()
        finally:
            self._service._release(self._file_id, self)


class LocalFileService:
    """Directory-based file service and blob store.

    Store each file's bytes as ``<id>.data`` and its metadata (MIME type, name,
    blob key) as ``<id>.meta.json`` under a root directory. File locks are held
    in-process only.
    """

    def __init__(self, root: str | Path) -> None:
        """Initialize with a root directory, creating it if needed."""
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._keys: dict[str, str] = {}
        self._locks: dict[str, object] = {}
        self._mutex = threading.Lock()
        self._load_keys()

    @property
    def root(self) -> Path:
        """Return the root directory path."""
        return self._root

    def _file_id(self, file: FileHandle) -> str | None:
        """Extract the file ID from a blobstore path, rejecting foreign paths."""
        if not file.path.startswith(BLOBSTORE_PREFIX):
            return None
        file_id = file.path[len(BLOBSTORE_PREFIX) :]
        if not file_id or not file_id.isalnum():
            return None
        return file_id

    def _data_path(self, file_id: str) -> Path:
        return self._root / f"{file_id}{_DATA_SUFFIX}"

    def _meta_path(self, file_id: str) -> Path:
        return self._root / f"{file_id}{_META_SUFFIX}"

    def _read_meta(self, file_id: str) -> dict[str, object] | None:
        """Read one metadata sidecar, returning ``None`` when missing or unreadable."""
        meta_path = self._meta_path(file_id)
        if not meta_path.exists() or not self._data_path(file_id).exists():
            return None
        try:
            raw = json.loads(meta_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return None
        if not isinstance(raw, dict):
            return None
        return {str(key): value for key, value in raw.items()}

    def _write_meta(self, file_id: str, meta: dict[str, object]) -> None:
        self._meta_path(file_id).write_text(json.dumps(meta, ensure_ascii=False), encoding="utf-8")

    def _load_keys(self) -> None:
        """Index blob keys of finalized files found under the root."""
        for meta_path in self._root.glob(f"*{_META_SUFFIX}"):
            file_id = meta_path.name[: -len(_META_SUFFIX)]
            meta = self._read_meta(file_id)
            if meta is None:
                continue
            blob_key = meta.get("blob_key")
            if isinstance(blob_key, str) and blob_key:
                self._keys[blob_key] = file_id

    def _acquire(self, file: FileHandle) -> tuple[str, dict[str, object]]:
        """Resolve a handle to its ID and metadata and check its lock; caller holds the mutex."""
        file_id = self._file_id(file)
        meta = self._read_meta(file_id) if file_id is not None else None
        if file_id is None or meta is None:
            raise FileNotFoundInServiceError(file.path)
        if file_id in self._locks:
            raise FileLockedError(file.path)
        return file_id, meta

    def create_new_blob_file(self, mime_type: str, name: str | None = None) -> FileHandle:
        """Allocate a new writable file on disk."""
        file_id = uuid.uuid4().hex
        self._data_path(file_id).write_bytes(b"")
        self._write_meta(file_id, {"mime_type": mime_type, "name": name, "blob_key": None})
        return FileHandle(f"{BLOBSTORE_PREFIX}{file_id}")

    def open_write_channel(self, file: FileHandle, *, locked: bool) -> _LocalWriteChannel:
        """Open an append channel on a writable file."""
        with self._mutex:
            file_id, meta = self._acquire(file)
            if meta.get("blob_key") is not None:
                raise FileFinalizedError(file.path)
            channel = _LocalWriteChannel(self, file_id, self._data_path(file_id).open("ab"))
            if locked:
                self._locks[file_id] = channel
        return channel

    def open_read_channel(self, file: FileHandle, *, locked: bool) -> _LocalReadChannel:
        """Open a read channel on a finalized file."""
        with self._mutex:
            file_id, meta = self._acquire(file)
            if meta.get("blob_key") is None:
                raise FileNotFinalizedError(file.path)
            channel = _LocalReadChannel(self, file_id, self._data_path(file_id).open("rb"))
            if locked:
                self._locks[file_id] = channel
        return channel

    def get_blob_key(self, file: FileHandle) -> BlobKey:
        """Return the blob key of a finalized file."""
        file_id = self._file_id(file)
        with self._mutex:
            meta = self._read_meta(file_id) if file_id is not None else None
        blob_key = meta.get("blob_key") if meta is not None else None
        if not isinstance(blob_key, str):
            raise BlobKeyNotFoundError(file.path)
        return BlobKey(blob_key)

    def get_file_for(self, key: BlobKey) -> FileHandle:
        """Return the file a blob key was assigned to."""
        with self._mutex:
            file_id = self._keys.get(key.value)
        if file_id is None:
            raise UnknownBlobKeyError(key.value)
        return FileHandle(f"{BLOBSTORE_PREFIX}{file_id}")

    def delete_by_key(self, key: BlobKey) -> None:
        """Delete a finalized file's data and metadata by blob key."""
        with self._mutex:
            file_id = self._keys.pop(key.value, None)
            if file_id is None:
                raise BlobNotFoundError(key.value)
            self._data_path(file_id).unlink(missing_ok=True)
            self._meta_path(file_id).unlink(missing_ok=True)

    def _release(self, file_id: str, channel: object, *, finalize: bool = False) -> None:
        """Drop the lock held by ``channel`` and optionally finalize the file."""
        with self._mutex:
            if self._locks.get(file_id) is channel:
                del self._locks[file_id]
            if not finalize:
                return
            meta = self._read_meta(file_id)
            if meta is None:
                msg = f"Cannot finalize {BLOBSTORE_PREFIX}{file_id}: file no longer exists."
                raise ChannelReleaseError(msg)
            if meta.get("blob_key") is None:
                blob_key = uuid.uuid4().hex
                meta["blob_key"] = blob_key
                self._write_meta(file_id, meta)
                self._keys[blob_key] = file_id
