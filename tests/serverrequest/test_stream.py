"""Tests the stream module."""

from __future__ import annotations

import io
import tempfile
from typing import Self
from unittest import TestCase

from serverrequest.stream import Stream


class TestStream(TestCase):
    """Tests the Stream class."""

    def test_str_content(self: Self) -> None:
        """Test that a str body is UTF-8 encoded."""
        uut = Stream("héllo")
        self.assertEqual(uut.read(), "héllo".encode())
        self.assertEqual(str(uut), "héllo")

    def test_bytes_content(self: Self) -> None:
        """Test reading a bytes body in parts."""
        uut = Stream(b"abcdef")
        self.assertEqual(uut.read(2), b"ab")
        self.assertEqual(uut.tell(), 2)
        self.assertEqual(uut.get_contents(), b"cdef")
        self.assertEqual(uut.read(), b"")
        uut.rewind()
        self.assertEqual(uut.read(3), b"abc")

    def test_file_object(self: Self) -> None:
        """Test wrapping an open binary file."""
        with tempfile.TemporaryFile() as fp:
            fp.write(b"from disk")
            fp.seek(0)
            uut = Stream(fp)
            self.assertTrue(uut.readable())
            self.assertTrue(uut.seekable())
            self.assertEqual(uut.read(), b"from disk")

    def test_shared_handle(self: Self) -> None:
        """Test that a Stream built from a Stream shares its position."""
        first = Stream(b"abc")
        second = Stream(first)
        first.read(1)
        self.assertEqual(second.read(), b"bc")

    def test_coerce(self: Self) -> None:
        """Test that coerce passes Streams through and wraps other values."""
        stream = Stream()
        self.assertIs(Stream.coerce(stream), stream)
        self.assertEqual(Stream.coerce(b"x").read(), b"x")
        self.assertEqual(Stream.coerce(io.BytesIO(b"y")).read(), b"y")

    def test_invalid(self: Self) -> None:
        """Test that unusable body types are rejected."""
        with self.assertRaises(TypeError):
            Stream(42)  # type: ignore[arg-type]

    def test_close(self: Self) -> None:
        """Test that close closes the underlying file object."""
        handle = io.BytesIO(b"x")
        Stream(handle).close()
        self.assertTrue(handle.closed)
