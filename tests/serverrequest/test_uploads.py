"""Tests the uploads module."""

from __future__ import annotations

import os
from typing import Self
from unittest import TestCase

from serverrequest.errors import InvalidUploadedFilesStructure
from serverrequest.stream import Stream
from serverrequest.uploads import (
    UploadedFile,
    copy_uploaded_files,
    validate_uploaded_files,
)


class MemoryFile(UploadedFile):
    """An UploadedFile held in memory."""

    __slots__ = {
        "_data": """The file contents.""",
    }

    _data: bytes

    def __init__(self: Self, data: bytes = b"") -> None:
        """
        Construct a new MemoryFile.

        :param data: The file contents.
        """
        self._data = data

    @property
    def stream(self: Self) -> Stream:  # noqa: D102
        return Stream(self._data)

    def move_to(self: Self, target_path: str | os.PathLike[str]) -> None:  # noqa: D102
        raise NotImplementedError

    @property
    def size(self: Self) -> int | None:  # noqa: D102
        return len(self._data)

    @property
    def error(self: Self) -> int:  # noqa: D102
        return 0

    @property
    def client_filename(self: Self) -> str | None:  # noqa: D102
        return None

    @property
    def client_media_type(self: Self) -> str | None:  # noqa: D102
        return None


class TestValidateUploadedFiles(TestCase):
    """Tests the validate_uploaded_files function."""

    def test_empty(self: Self) -> None:
        """Test that empty structures are valid."""
        validate_uploaded_files({})
        validate_uploaded_files([])

    def test_flat(self: Self) -> None:
        """Test flat mappings and lists of files."""
        validate_uploaded_files({"a": MemoryFile(), "b": MemoryFile()})
        validate_uploaded_files([MemoryFile(), MemoryFile()])

    def test_nested(self: Self) -> None:
        """Test files nested in mappings and lists to several levels."""
        validate_uploaded_files(
            {
                "a": [MemoryFile(), MemoryFile()],
                "b": {"c": MemoryFile(), "d": {"e": [[MemoryFile()], []]}},
                "f": (MemoryFile(),),
            }
        )

    def test_registered_subclass(self: Self) -> None:
        """
        Test that a virtual subclass of UploadedFile is accepted.

        The registration lasts for the rest of the process, so the registered class is
        local to this test.
        """

        class Foreign:
            pass

        self.assertNotIsInstance(Foreign(), UploadedFile)
        UploadedFile.register(Foreign)
        validate_uploaded_files({"a": Foreign()})

    def test_invalid_leaves(self: Self) -> None:
        """Test that non-file leaves are rejected with their type in the message."""
        for leaf, name in (
            ("not-a-file", "str"),
            (b"bytes", "bytes"),
            (None, "NoneType"),
            (42, "int"),
            (True, "bool"),
        ):
            with self.subTest(leaf=leaf):
                with self.assertRaises(InvalidUploadedFilesStructure) as cm:
                    validate_uploaded_files({"a": [MemoryFile(), leaf]})
                self.assertEqual(cm.exception.type_name, name)
                self.assertIn(name, str(cm.exception))

    def test_invalid_deep_leaf(self: Self) -> None:
        """Test that an invalid leaf is found at any depth."""
        with self.assertRaises(InvalidUploadedFilesStructure):
            validate_uploaded_files({"a": {"b": {"c": [MemoryFile(), [object()]]}}})

    def test_qualified_type_name(self: Self) -> None:
        """Test that a non-builtin type is named with its module."""
        with self.assertRaises(InvalidUploadedFilesStructure) as cm:
            validate_uploaded_files([Stream()])
        self.assertEqual(cm.exception.type_name, "serverrequest.stream.Stream")

    def test_first_invalid_leaf_reported(self: Self) -> None:
        """Test that validation stops at the first invalid leaf in depth-first order."""
        with self.assertRaises(InvalidUploadedFilesStructure) as cm:
            validate_uploaded_files([[MemoryFile(), 1], "second"])
        self.assertEqual(cm.exception.type_name, "int")

    def test_top_level_leaf(self: Self) -> None:
        """Test that a structure which is not a mapping or list is rejected."""
        with self.assertRaises(InvalidUploadedFilesStructure):
            validate_uploaded_files("file")


class TestCopyUploadedFiles(TestCase):
    """Tests the copy_uploaded_files function."""

    def test_branches_copied_leaves_shared(self: Self) -> None:
        """Test that every branch is a new object and every leaf is the same one."""
        upload = MemoryFile()
        tree = {"a": [upload, {"b": (upload,)}]}
        uut = copy_uploaded_files(tree)
        self.assertEqual(uut, tree)
        self.assertIsNot(uut, tree)
        self.assertIsNot(uut["a"], tree["a"])
        self.assertIsNot(uut["a"][1], tree["a"][1])
        self.assertIsInstance(uut["a"][1]["b"], tuple)
        self.assertIs(uut["a"][0], upload)
        self.assertIs(uut["a"][1]["b"][0], upload)
