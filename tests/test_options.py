"""Tests for blobfiles.options."""

import pytest

from blobfiles.options import DEFAULT_ENCODING, ChannelOptions


def test_defaults() -> None:
    options = ChannelOptions()
    assert options.encoding == "UTF-8"
    assert options.locked is True
    assert options.finalize is True


def test_for_write_with_no_options_uses_defaults() -> None:
    assert ChannelOptions.for_write() == ChannelOptions()
    assert ChannelOptions.for_write({}) == ChannelOptions()


def test_for_write_takes_supplied_values() -> None:
    options = ChannelOptions.for_write({"encoding": "US-ASCII", "locked": False, "finalize": False})
    assert options == ChannelOptions(encoding="US-ASCII", locked=False, finalize=False)


@pytest.mark.parametrize(
    ("supplied", "expected"),
    [
        ({"locked": False}, ChannelOptions(locked=False)),
        ({"finalize": False}, ChannelOptions(finalize=False)),
        ({"encoding": "latin-1"}, ChannelOptions(encoding="latin-1")),
    ],
)
def test_for_write_missing_keys_fall_back_to_defaults(supplied: dict[str, object], expected: ChannelOptions) -> None:
    assert ChannelOptions.for_write(supplied) == expected


def test_for_read_never_finalizes() -> None:
    assert ChannelOptions.for_read().finalize is False
    assert ChannelOptions.for_read({"finalize": True}).finalize is False


def test_for_read_takes_encoding_and_locked() -> None:
    options = ChannelOptions.for_read({"encoding": "UTF-16", "locked": False})
    assert options.encoding == "UTF-16"
    assert options.locked is False


def test_unrecognized_keys_are_ignored() -> None:
    options = ChannelOptions.for_write({"mode": "append", "retries": 3})
    assert options == ChannelOptions()


@pytest.mark.parametrize("encoding", [None, ""])
def test_unset_encoding_falls_back_to_utf8(encoding: object) -> None:
    assert ChannelOptions.for_write({"encoding": encoding}).encoding == DEFAULT_ENCODING


def test_flags_are_coerced_to_bool() -> None:
    options = ChannelOptions.for_write({"locked": 0, "finalize": 1})
    assert options.locked is False
    assert options.finalize is True


def test_non_string_encoding_raises() -> None:
    with pytest.raises(TypeError, match="encoding"):
        ChannelOptions.for_read({"encoding": 8})


def test_options_are_frozen() -> None:
    options = ChannelOptions()
    with pytest.raises(AttributeError):
        options.locked = False  # type: ignore[misc]


def test_unknown_encoding_raises_lookup_error() -> None:
    with pytest.raises(LookupError):
        ChannelOptions.for_write({"encoding": "utf8x"})
    with pytest.raises(LookupError):
        ChannelOptions.for_read({"encoding": "utf8x"})
