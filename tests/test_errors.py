"""Tests for blobfiles.errors."""

import pytest

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


def test_blobfiles_error_is_exception() -> None:
    assert issubclass(BlobFilesError, Exception)


@pytest.mark.parametrize(
    "error_type",
    [FileLockedError, FileFinalizedError, FileNotFinalizedError, FileNotFoundInServiceError],
)
def test_acquisition_errors_carry_path(error_type: type[ChannelAcquisitionError]) -> None:
    err = error_type("/blobstore/writable:abc")
    assert isinstance(err, ChannelAcquisitionError)
    assert isinstance(err, BlobFilesError)
    assert err.path == "/blobstore/writable:abc"
    assert "/blobstore/writable:abc" in str(err)


def test_channel_closed_is_release_error() -> None:
    err = ChannelClosedError("/gs/a")
    assert isinstance(err, ChannelReleaseError)
    assert err.path == "/gs/a"


def test_resolution_errors() -> None:
    missing = BlobKeyNotFoundError("/gs/a")
    unknown = UnknownBlobKeyError("k1")
    assert isinstance(missing, BlobKeyResolutionError)
    assert isinstance(unknown, BlobKeyResolutionError)
    assert missing.path == "/gs/a"
    assert unknown.key == "k1"
    assert "k1" in str(unknown)


def test_blob_not_found_carries_blob_id() -> None:
    err = BlobNotFoundError("abc123")
    assert isinstance(err, BlobFilesError)
    assert err.blob_id == "abc123"
    assert "abc123" in str(err)
