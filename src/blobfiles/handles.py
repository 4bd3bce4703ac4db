"""FileHandle and BlobKey: immutable identifiers for remotely-stored files."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FileHandle:
    """Opaque reference to a remotely-stored file, finalized or not.

    Paths follow the ``/<file system>/<name>`` convention of the file service,
    e.g. ``/blobstore/writable:3f2a...``. A handle may point at a file that does
    not exist yet.
    """

    path: str

    @property
    def file_system(self) -> str | None:
        """Return the leading path segment, or ``None`` for relative paths."""
        if not self.path.startswith("/"):
            return None
        head = self.path[1:].split("/", 1)[0]
        return head or None

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class BlobKey:
    """Durable key assigned to a file once it is finalized."""

    value: str

    def __str__(self) -> str:
        return self.value
