"""FileService protocols and reference backends for blobfiles."""

from blobfiles.service._local import LocalFileService
from blobfiles.service._memory import InMemoryFileService
from blobfiles.service._service import BlobDeleter, FileService, ReadChannel, WriteChannel

__all__ = [
    "BlobDeleter",
    "FileService",
    "InMemoryFileService",
    "LocalFileService",
    "ReadChannel",
    "WriteChannel",
]
