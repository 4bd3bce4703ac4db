"""blobfiles: scoped read/write channels over blobstore-backed files."""

import importlib.metadata as importlib_metadata

from blobfiles.errors import (
    BlobFilesError,
    BlobKeyNotFoundError,
    BlobKeyResolutionError,
    BlobNotFoundError,
    ChannelAcquisitionError,
    ChannelClosedError,
    ChannelReleaseError,
    FileFinalizedError,
    FileLockedError,
    FileNotFinalizedError,
    FileNotFoundInServiceError,
    UnknownBlobKeyError,
)
from blobfiles.files import blob_key_of, delete, file_of, from_path
from blobfiles.handles import BlobKey, FileHandle
from blobfiles.options import ChannelOptions
from blobfiles.service import (
    BlobDeleter,
    FileService,
    InMemoryFileService,
    LocalFileService,
    ReadChannel,
    WriteChannel,
)
from blobfiles.sessions import (
    open_input_stream,
    open_output_stream,
    open_reader,
    open_writer,
    with_input_stream,
    with_output_stream,
    with_reader,
    with_writer,
)


def _detect_version() -> str:
    """Return installed package version or a local fallback when metadata is unavailable."""
    try:
        return importlib_metadata.version("blobfiles")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _detect_version()

__all__ = [
    "BlobDeleter",
    "BlobFilesError",
    "BlobKey",
    "BlobKeyNotFoundError",
    "BlobKeyResolutionError",
    "BlobNotFoundError",
    "ChannelAcquisitionError",
    "ChannelClosedError",
    "ChannelOptions",
    "ChannelReleaseError",
    "FileFinalizedError",
    "FileHandle",
    "FileLockedError",
    "FileNotFinalizedError",
    "FileNotFoundInServiceError",
    "FileService",
    "InMemoryFileService",
    "LocalFileService",
    "ReadChannel",
    "UnknownBlobKeyError",
    "WriteChannel",
    "blob_key_of",
    "delete",
    "file_of",
    "from_path",
    "open_input_stream",
    "open_output_stream",
    "open_reader",
    "open_writer",
    "with_input_stream",
    "with_output_stream",
    "with_reader",
    "with_writer",
]
