"""Lookup between file handles and blob keys, and deletion by handle."""

from __future__ import annotations

from typing import TYPE_CHECKING

from blobfiles.handles import BlobKey, FileHandle

if TYPE_CHECKING:
    from blobfiles.service import BlobDeleter, FileService


def from_path(path: str) -> FileHandle:
    """Build a handle from a path without contacting the service.

    The file does not need to exist yet.
    """
    return FileHandle(path)


def blob_key_of(service: FileService, file: FileHandle) -> BlobKey:
    """Return the blob key of a finalized file.

    Raises ``BlobKeyNotFoundError`` when the file was never finalized.
    """
    return service.get_blob_key(file)


def file_of(service: FileService, key: BlobKey) -> FileHandle:
    """Return the file a blob key belongs to.

    Raises ``UnknownBlobKeyError`` when the key is unknown.
    """
    return service.get_file_for(key)


def delete(service: FileService, blob_store: BlobDeleter, file: FileHandle) -> None:
    """Delete a finalized file from the blob store.

    The blob key is resolved first; when that fails no deletion is attempted.
    """
    key = blob_key_of(service, file)
    blob_store.delete_by_key(key)
