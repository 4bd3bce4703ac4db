"""Tests for FileHandle and BlobKey."""

import pytest

from blobfiles.handles import BlobKey, FileHandle


def test_file_handle_is_immutable() -> None:
    handle = FileHandle("/blobstore/writable:abc")
    with pytest.raises(AttributeError):
        handle.path = "/other"  # type: ignore[misc]


def test_file_handle_equality_and_hash() -> None:
    assert FileHandle("/gs/bucket/a") == FileHandle("/gs/bucket/a")
    assert len({FileHandle("/gs/bucket/a"), FileHandle("/gs/bucket/a")}) == 1


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/blobstore/writable:abc", "blobstore"),
        ("/gs/bucket/object", "gs"),
        ("relative/path", None),
        ("/", None),
    ],
)
def test_file_system(path: str, expected: str | None) -> None:
    assert FileHandle(path).file_system == expected


def test_str_returns_path_and_key() -> None:
    assert str(FileHandle("/gs/bucket/a")) == "/gs/bucket/a"
    assert str(BlobKey("k1")) == "k1"
