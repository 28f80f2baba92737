"""Uploaded files and validation of uploaded-files structures."""

from __future__ import annotations

import abc
import logging
import os
from collections.abc import Mapping, Sequence
from typing import Self

from .errors import InvalidUploadedFilesStructure, type_name
from .stream import Stream
from .types import UploadedFilesTree


class UploadedFile(abc.ABC):
    """
    A file submitted as part of a multipart form upload.

    Only instances of this class (including virtual subclasses registered with
    UploadedFile.register) are accepted as leaves of an uploaded-files structure. How
    the file is stored and moved is up to the concrete implementation.
    """

    __slots__ = ()

    @property
    @abc.abstractmethod
    def stream(self: Self) -> Stream:
        """Return a stream over the uploaded file’s contents."""

    @abc.abstractmethod
    def move_to(self: Self, target_path: str | os.PathLike[str]) -> None:
        """
        Move the uploaded file to a new location.

        :param target_path: The path to move the file to.
        """

    @property
    @abc.abstractmethod
    def size(self: Self) -> int | None:
        """Return the file size in bytes, or None if unknown."""

    @property
    @abc.abstractmethod
    def error(self: Self) -> int:
        """Return the upload error code, zero if the upload succeeded."""

    @property
    @abc.abstractmethod
    def client_filename(self: Self) -> str | None:
        """Return the filename sent by the client, which must not be trusted."""

    @property
    @abc.abstractmethod
    def client_media_type(self: Self) -> str | None:
        """Return the media type sent by the client, which must not be trusted."""


def _is_branch(node: object) -> bool:
    """
    Check whether a node of an uploaded-files structure has children.

    Strings and byte strings are sequences, but they are leaves here.

    :param node: The node.
    :returns: True if node is a mapping or a non-string sequence.
    """
    if isinstance(node, str | bytes | bytearray):
        return False
    return isinstance(node, Mapping | Sequence)


def _children(node: Mapping[object, object] | Sequence[object]) -> Sequence[object]:
    """Return the child nodes of a branch, in order."""
    if isinstance(node, Mapping):
        return list(node.values())
    return node


def validate_uploaded_files(tree: object) -> None:
    """
    Check that every leaf of an uploaded-files structure is an UploadedFile.

    The structure is walked depth-first, and the first invalid leaf aborts the walk.
    There is no depth limit, so a structure containing itself recurses until Python’s
    recursion limit is reached.

    :param tree: The structure, normally a mapping or list whose values are
        UploadedFile instances or further mappings or lists.
    :raises InvalidUploadedFilesStructure: If a leaf is not an UploadedFile.
    """
    if not _is_branch(tree):
        _check_leaf(tree)
        return
    assert isinstance(tree, Mapping | Sequence)
    for child in _children(tree):
        if _is_branch(child):
            validate_uploaded_files(child)
        else:
            _check_leaf(child)


def _check_leaf(leaf: object) -> None:
    """
    Check a single leaf.

    :param leaf: The leaf.
    :raises InvalidUploadedFilesStructure: If the leaf is not an UploadedFile.
    """
    if isinstance(leaf, UploadedFile):
        return
    name = type_name(leaf)
    logging.getLogger(__name__).debug("Rejected uploaded files leaf of type %s", name)
    msg = (
        "Invalid item in uploaded files structure: "
        f"{name} is not an instance of {UploadedFile.__module__}.UploadedFile"
    )
    raise InvalidUploadedFilesStructure(msg, name)


def copy_uploaded_files(tree: UploadedFilesTree) -> UploadedFilesTree:
    """
    Copy every mapping and sequence of an uploaded-files structure.

    Leaves are shared with the original; branches are not, so changing any branch of
    the copy, at any depth, leaves the original unchanged and vice versa. Mappings
    become dicts, tuples stay tuples, and other sequences become lists.

    :param tree: The structure, which must already have been validated.
    :returns: The copy.
    """
    if isinstance(tree, Mapping):
        return {
            key: copy_uploaded_files(value) if _is_branch(value) else value
            for key, value in tree.items()
        }
    items = [copy_uploaded_files(item) if _is_branch(item) else item for item in tree]
    return tuple(items) if isinstance(tree, tuple) else items
