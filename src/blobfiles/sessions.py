"""Scoped read and write sessions over file service channels.

Each session opens exactly one channel, wraps it in a text or binary view,
hands the view to caller code and releases the channel on every exit path.

Cleanup order is always: close the view (flushing buffered output), then
release the channel. Write channels are released with ``close_finally()``
when the resolved ``finalize`` option is set and with ``close()`` otherwise;
read channels always use ``close()``.

When caller code raises, the original exception is the one that propagates.
Failures of the cleanup steps that run afterwards are attached to it as notes
(``BaseException.add_note``) instead of replacing it.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import TYPE_CHECKING, TypeVar

from blobfiles.options import ChannelOptions

if TYPE_CHECKING:
    from _typeshed import ReadableBuffer, WriteableBuffer

    from blobfiles.handles import FileHandle
    from blobfiles.service import FileService, ReadChannel, WriteChannel

_View = TypeVar("_View", bound=io.IOBase)


class _ChannelWriterIO(io.RawIOBase):
    """Raw byte sink forwarding to a write channel; closing it leaves the channel open."""

    def __init__(self, channel: WriteChannel) -> None:
        self._channel = channel

    def writable(self) -> bool:
        return True

    def write(self, b: ReadableBuffer) -> int:
        return self._channel.write(bytes(b))


class _ChannelReaderIO(io.RawIOBase):
    """Raw byte source reading from a read channel; closing it leaves the channel open."""

    def __init__(self, channel: ReadChannel) -> None:
        self._channel = channel

    def readable(self) -> bool:
        return True

    def readinto(self, buffer: WriteableBuffer) -> int:
        target = memoryview(buffer).cast("B")
        data = self._channel.read(len(target))
        size = len(data)
        target[:size] = data
        return size


def _output_stream(channel: WriteChannel) -> io.BufferedWriter:
    return io.BufferedWriter(_ChannelWriterIO(channel))


def _input_stream(channel: ReadChannel) -> io.BufferedReader:
    return io.BufferedReader(_ChannelReaderIO(channel))


def _text_writer(channel: WriteChannel, encoding: str) -> io.TextIOWrapper:
    # newline="" leaves line endings untouched in both directions.
    return io.TextIOWrapper(_output_stream(channel), encoding=encoding, newline="")


def _text_reader(channel: ReadChannel, encoding: str) -> io.TextIOWrapper:
    return io.TextIOWrapper(_input_stream(channel), encoding=encoding, newline="")


def _cleanup_noting(failure: BaseException, cleanup: Callable[[], object]) -> None:
    """Run one cleanup step while ``failure`` propagates, recording its error as a note."""
    try:
        cleanup()
    except Exception as cleanup_error:  # noqa: BLE001
        failure.add_note(f"Cleanup after failure also failed: {cleanup_error!r}")


@contextmanager
def _channel_session(
    build_view: Callable[[], _View],
    release: Callable[[], None],
) -> Iterator[_View]:
    """Yield the view from ``build_view``; close it and call ``release`` on exit."""
    try:
        view = build_view()
    except BaseException as exc:
        _cleanup_noting(exc, release)
        raise

    try:
        yield view
    except BaseException as exc:
        _cleanup_noting(exc, view.close)
        _cleanup_noting(exc, release)
        raise

    try:
        view.close()
    except BaseException as exc:
        _cleanup_noting(exc, release)
        raise
    release()


def _write_release(channel: WriteChannel, options: ChannelOptions) -> Callable[[], None]:
    return channel.close_finally if options.finalize else channel.close


@contextmanager
def open_writer(
    service: FileService,
    file: FileHandle,
    options: Mapping[str, object] | None = None,
) -> Iterator[io.TextIOWrapper]:
    """Open a text writer on ``file`` for the duration of a ``with`` block.

    Recognized options: ``encoding`` (default ``"UTF-8"``), ``locked`` and
    ``finalize`` (both default ``True``).
    """
    resolved = ChannelOptions.for_write(options)
    channel = service.open_write_channel(file, locked=resolved.locked)
    with _channel_session(
        lambda: _text_writer(channel, resolved.encoding),
        _write_release(channel, resolved),
    ) as writer:
        yield writer


@contextmanager
def open_output_stream(
    service: FileService,
    file: FileHandle,
    options: Mapping[str, object] | None = None,
) -> Iterator[io.BufferedWriter]:
    """Open a binary output stream on ``file`` for the duration of a ``with`` block.

    Recognized options: ``locked`` and ``finalize`` (both default ``True``).
    """
    resolved = ChannelOptions.for_write(options)
    channel = service.open_write_channel(file, locked=resolved.locked)
    with _channel_session(lambda: _output_stream(channel), _write_release(channel, resolved)) as stream:
        yield stream


@contextmanager
def open_reader(
    service: FileService,
    file: FileHandle,
    options: Mapping[str, object] | None = None,
) -> Iterator[io.TextIOWrapper]:
    """Open a buffered text reader on ``file`` for the duration of a ``with`` block.

    Recognized options: ``encoding`` (default ``"UTF-8"``) and ``locked``
    (default ``True``).
    """
    resolved = ChannelOptions.for_read(options)
    channel = service.open_read_channel(file, locked=resolved.locked)
    with _channel_session(lambda: _text_reader(channel, resolved.encoding), channel.close) as reader:
        yield reader


@contextmanager
def open_input_stream(
    service: FileService,
    file: FileHandle,
    options: Mapping[str, object] | None = None,
) -> Iterator[io.BufferedReader]:
    """Open a buffered binary input stream on ``file`` for the duration of a ``with`` block.

    Recognized option: ``locked`` (default ``True``).
    """
    resolved = ChannelOptions.for_read(options)
    channel = service.open_read_channel(file, locked=resolved.locked)
    with _channel_session(lambda: _input_stream(channel), channel.close) as stream:
        yield stream


def with_writer(
    service: FileService,
    file: FileHandle,
    action: Callable[[io.TextIOWrapper], object],
    options: Mapping[str, object] | None = None,
) -> FileHandle:
    """Write text to ``file`` through ``action`` and return ``file`` for chaining."""
    with open_writer(service, file, options) as writer:
        action(writer)
    return file


def with_output_stream(
    service: FileService,
    file: FileHandle,
    action: Callable[[io.BufferedWriter], object],
    options: Mapping[str, object] | None = None,
) -> FileHandle:
    """Write bytes to ``file`` through ``action`` and return ``file`` for chaining."""
    with open_output_stream(service, file, options) as stream:
        action(stream)
    return file


def with_reader(
    service: FileService,
    file: FileHandle,
    action: Callable[[io.TextIOWrapper], object],
    options: Mapping[str, object] | None = None,
) -> FileHandle:
    """Read text from ``file`` through ``action`` and return ``file`` for chaining."""
    with open_reader(service, file, options) as reader:
        action(reader)
    return file


def with_input_stream(
    service: FileService,
    file: FileHandle,
    action: Callable[[io.BufferedReader], object],
    options: Mapping[str, object] | None = None,
) -> FileHandle:
    """Read bytes from ``file`` through ``action`` and return ``file`` for chaining."""
    with open_input_stream(service, file, options) as stream:
        action(stream)
    return file
