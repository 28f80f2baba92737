"""Message body streams."""

from __future__ import annotations

import io
from typing import BinaryIO, Self

from .types import BodyInput


class Stream:
    """
    A readable byte stream holding a message body.

    A Stream wraps a binary file object. Several messages may share one Stream, because
    a copied message refers to the same body as the message it was copied from.
    """

    __slots__ = {
        "_handle": """The underlying binary file object.""",
    }

    _handle: BinaryIO

    def __init__(self: Self, body: Stream | BodyInput = b"") -> None:
        """
        Construct a new Stream.

        :param body: A Stream to share the handle of, a str to be UTF-8 encoded and
            used as the content, bytes to use as the content, or an open binary file
            object.
        """
        if isinstance(body, Stream):
            self._handle = body._handle
        elif isinstance(body, str):
            self._handle = io.BytesIO(body.encode("UTF-8"))
        elif isinstance(body, bytes | bytearray):
            self._handle = io.BytesIO(body)
        elif hasattr(body, "read"):
            self._handle = body
        else:
            msg = f"Cannot use {type(body).__qualname__} as a message body"
            raise TypeError(msg)

    @classmethod
    def coerce(cls: type[Stream], body: Stream | BodyInput) -> Stream:
        """
        Return body as a Stream.

        :param body: A Stream, which is returned unchanged, or anything accepted by the
            constructor.
        :returns: The Stream.
        """
        if isinstance(body, Stream):
            return body
        return cls(body)

    def read(self: Self, size: int = -1) -> bytes:
        """
        Read bytes from the current position.

        :param size: The maximum number of bytes to read, or -1 to read to the end.
        :returns: The bytes read, which are empty at the end of the stream.
        """
        return self._handle.read(size)

    def readable(self: Self) -> bool:
        """Return whether the stream can be read."""
        return self._handle.readable()

    def seekable(self: Self) -> bool:
        """Return whether the stream supports random access."""
        return self._handle.seekable()

    def seek(self: Self, offset: int, whence: int = io.SEEK_SET) -> int:
        """
        Move to a new position.

        :param offset: The offset, relative to whence.
        :param whence: One of io.SEEK_SET, io.SEEK_CUR, or io.SEEK_END.
        :returns: The new absolute position.
        """
        return self._handle.seek(offset, whence)

    def tell(self: Self) -> int:
        """Return the current position."""
        return self._handle.tell()

    def rewind(self: Self) -> None:
        """Move to the start of the stream."""
        self.seek(0)

    def get_contents(self: Self) -> bytes:
        """Return the remaining bytes from the current position to the end."""
        return self.read()

    def close(self: Self) -> None:
        """Close the underlying file object."""
        self._handle.close()

    def __str__(self: Self) -> str:
        """Return the whole content, decoded as UTF-8."""
        if self.seekable():
            self.rewind()
        return self.get_contents().decode("UTF-8", errors="replace")
