"""ChannelOptions: resolved policy for one read or write session."""

import codecs
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_ENCODING = "UTF-8"


@dataclass(frozen=True, slots=True)
class ChannelOptions:
    """Encoding, locking and finalization policy for a channel session.

    Both ``locked`` and ``finalize`` default to ``True``: a session takes the
    exclusive file lock and a write session finalizes the file unless the
    caller opts out explicitly.
    """

    encoding: str = DEFAULT_ENCODING
    locked: bool = True
    finalize: bool = True

    @classmethod
    def for_write(cls, options: Mapping[str, object] | None = None) -> "ChannelOptions":
        """Resolve ``encoding``, ``locked`` and ``finalize`` for a write session.

        Unrecognized keys are ignored.
        """
        values = options or {}
        return cls(
            encoding=_encoding(values),
            locked=bool(values["locked"]) if "locked" in values else True,
            finalize=bool(values["finalize"]) if "finalize" in values else True,
        )

    @classmethod
    def for_read(cls, options: Mapping[str, object] | None = None) -> "ChannelOptions":
        """Resolve ``encoding`` and ``locked`` for a read session.

        Reading never finalizes, so ``finalize`` is always ``False`` and a
        supplied ``finalize`` key is ignored like any other unrecognized key.
        """
        values = options or {}
        return cls(
            encoding=_encoding(values),
            locked=bool(values["locked"]) if "locked" in values else True,
            finalize=False,
        )


def _encoding(values: Mapping[str, object]) -> str:
    """Return the requested encoding, falling back to UTF-8 when unset or empty.

    Unknown codec names raise ``LookupError`` here, before any channel is opened.
    """
    encoding = values.get("encoding")
    if encoding is None or encoding == "":
        return DEFAULT_ENCODING
    if not isinstance(encoding, str):
        msg = "ChannelOptions.encoding must be a string."
        raise TypeError(msg)
    codecs.lookup(encoding)
    return encoding
